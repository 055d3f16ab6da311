# app/models/user_activity.py
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Text
from app.db.base_class import Base
from app.utils.dates import utcnow


class UserActivity(Base):
    """Append-only audit trail of what a user did. Rows are never updated."""

    __tablename__ = "user_activities"

    id = Column(
        String, primary_key=True, default=lambda: f"act_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    activity_type = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=False)
    related_entity_type = Column(String(50), nullable=True)
    related_entity_id = Column(String, nullable=True)
    # `metadata` is reserved on declarative classes
    activity_metadata = Column("metadata", JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
