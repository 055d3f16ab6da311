# app/models/certificate.py
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.db.base_class import Base
from app.utils.dates import utcnow


class Certificate(Base):
    __tablename__ = "certificates"

    id = Column(
        String, primary_key=True, default=lambda: f"cert_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(String, ForeignKey("events.id"), nullable=False, index=True)
    event_registration_id = Column(
        String, ForeignKey("event_registrations.id"), nullable=False, unique=True
    )
    certificate_number = Column(String, nullable=False, unique=True)
    verification_code = Column(String(13), nullable=False, unique=True, index=True)
    title = Column(String(300), nullable=False)
    participation_type = Column(String(50), nullable=False, default="participant")
    status = Column(
        Enum("pending", "issued", "downloaded", name="certificate_status_enum"),
        nullable=False,
        default="pending",
        server_default="pending",
    )
    issued_date = Column(DateTime, nullable=False, default=utcnow)

    event_registration = relationship("EventRegistration", back_populates="certificate")
    event = relationship("Event")
