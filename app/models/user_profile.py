# app/models/user_profile.py
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, text
from sqlalchemy.orm import relationship
from app.db.base_class import Base
from app.utils.dates import utcnow


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(
        String, primary_key=True, default=lambda: f"prf_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    phone = Column(String(20), nullable=True)
    institution = Column(String(100), nullable=True)
    occupation = Column(String(100), nullable=True)
    biography = Column(String(500), nullable=True)
    profile_image_url = Column(String, nullable=True)
    date_of_birth = Column(DateTime, nullable=True)
    country = Column(String(50), nullable=True)
    city = Column(String(50), nullable=True)
    social_links = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="profile")


class NotificationPreferences(Base):
    __tablename__ = "notification_preferences"

    id = Column(
        String, primary_key=True, default=lambda: f"npf_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    email_new_events = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    email_event_reminders = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    email_certificates_available = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    email_newsletter = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    platform_new_events = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    platform_event_reminders = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    platform_certificates_available = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    platform_updates = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="notification_preferences")
