# app/models/event_session.py
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text, text
from sqlalchemy.orm import relationship
from app.db.base_class import Base


class EventSession(Base):
    __tablename__ = "event_sessions"

    id = Column(
        String, primary_key=True, default=lambda: f"ses_{uuid.uuid4().hex[:12]}"
    )
    event_id = Column(
        String, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    speaker = Column(String(200), nullable=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    # None means the session has no seat limit of its own
    max_capacity = Column(Integer, nullable=True)
    current_registrations = Column(Integer, nullable=False, default=0, server_default="0")
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    requires_registration = Column(Boolean, nullable=False, default=False, server_default=text("false"))

    event = relationship("Event", back_populates="sessions")
    registrations = relationship("SessionRegistration", back_populates="session")
