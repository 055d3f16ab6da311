# app/models/notification.py
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, text
from app.db.base_class import Base
from app.utils.dates import utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(
        String, primary_key=True, default=lambda: f"ntf_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # registration, cancellation, certificate, security, account, system ...
    type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    related_entity_type = Column(String(50), nullable=True)
    related_entity_id = Column(String, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    read_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
