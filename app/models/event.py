# app/models/event.py
import uuid
from sqlalchemy import (
    Column,
    String,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    Text,
    CheckConstraint,
    text,
)
from sqlalchemy.orm import relationship
from app.db.base_class import Base
from app.utils.dates import utcnow


class Event(Base):
    __tablename__ = "events"

    id = Column(
        String, primary_key=True, default=lambda: f"evt_{uuid.uuid4().hex[:12]}"
    )
    organizer_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String(300), nullable=True)
    image_url = Column(String, nullable=True)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False)
    location = Column(String(200), nullable=False)
    address = Column(String(300), nullable=True)
    max_capacity = Column(Integer, nullable=False)
    current_registrations = Column(Integer, nullable=False, default=0, server_default="0")
    requires_certificate = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    is_featured = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    # Soft-delete flag; inactive events are hidden from the public listing
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    tags = Column(JSON, nullable=True)
    requirements = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    organizer = relationship("User", back_populates="organized_events")
    category = relationship("Category", back_populates="events")
    sessions = relationship(
        "EventSession",
        back_populates="event",
        order_by="EventSession.start_time",
        cascade="all, delete-orphan",
    )
    registrations = relationship("EventRegistration", back_populates="event")

    __table_args__ = (
        CheckConstraint(
            "current_registrations >= 0 AND current_registrations <= max_capacity",
            name="ck_events_registrations_within_capacity",
        ),
    )
