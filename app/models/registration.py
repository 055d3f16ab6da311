# app/models/registration.py
import uuid
from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    Enum,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from app.db.base_class import Base
from app.utils.dates import utcnow

REGISTRATION_STATUSES = ("registered", "cancelled", "attended", "no-show")


class EventRegistration(Base):
    __tablename__ = "event_registrations"

    id = Column(
        String, primary_key=True, default=lambda: f"reg_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(String, ForeignKey("events.id"), nullable=False, index=True)
    status = Column(
        Enum(*REGISTRATION_STATUSES, name="registration_status_enum"),
        nullable=False,
        default="registered",
        server_default="registered",
    )
    registration_date = Column(DateTime, nullable=False, default=utcnow)

    # Attendance token presented at the door
    qr_code = Column(String, nullable=False, unique=True, index=True)
    notes = Column(String(500), nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(String(500), nullable=True)
    checked_in_at = Column(DateTime, nullable=True)
    checked_out_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="registrations")
    event = relationship("Event", back_populates="registrations")
    session_registrations = relationship(
        "SessionRegistration",
        back_populates="event_registration",
        cascade="all, delete-orphan",
    )
    certificate = relationship(
        "Certificate", back_populates="event_registration", uselist=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_event_registration_user_event"),
    )


class SessionRegistration(Base):
    __tablename__ = "session_registrations"

    id = Column(
        String, primary_key=True, default=lambda: f"sreg_{uuid.uuid4().hex[:12]}"
    )
    event_registration_id = Column(
        String,
        ForeignKey("event_registrations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    session_id = Column(
        String, ForeignKey("event_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    registered_at = Column(DateTime, nullable=False, default=utcnow)

    event_registration = relationship(
        "EventRegistration", back_populates="session_registrations"
    )
    session = relationship("EventSession", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint(
            "event_registration_id", "session_id", name="uq_session_registration"
        ),
    )
