# app/schemas/profile.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.certificate import Certificate
from app.schemas.notification import Notification
from app.schemas.user import User, check_password_strength


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, max_length=20, pattern=r"^[0-9+\-\s()]*$")
    institution: Optional[str] = Field(None, max_length=100)
    occupation: Optional[str] = Field(None, max_length=100)
    biography: Optional[str] = Field(None, max_length=500)
    date_of_birth: Optional[datetime] = None
    country: Optional[str] = Field(None, max_length=50)
    city: Optional[str] = Field(None, max_length=50)
    social_links: Optional[Dict[str, str]] = None


class Profile(ProfileUpdate):
    profile_image_url: Optional[str] = None

    model_config = {"from_attributes": True}


class NotificationPreferencesUpdate(BaseModel):
    email_new_events: Optional[bool] = None
    email_event_reminders: Optional[bool] = None
    email_certificates_available: Optional[bool] = None
    email_newsletter: Optional[bool] = None
    platform_new_events: Optional[bool] = None
    platform_event_reminders: Optional[bool] = None
    platform_certificates_available: Optional[bool] = None
    platform_updates: Optional[bool] = None


class NotificationPreferences(BaseModel):
    email_new_events: bool = True
    email_event_reminders: bool = True
    email_certificates_available: bool = True
    email_newsletter: bool = False
    platform_new_events: bool = True
    platform_event_reminders: bool = True
    platform_certificates_available: bool = True
    platform_updates: bool = False

    model_config = {"from_attributes": True}


class PasswordChange(BaseModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)


class EmailChange(BaseModel):
    new_email: EmailStr
    password: str


class ProfileImage(BaseModel):
    image_url: str = Field(..., max_length=2048)


class DeactivationRequest(BaseModel):
    password: str
    reason: Optional[str] = Field(None, max_length=500)


class ProfileStatistics(BaseModel):
    total_registrations: int = 0
    total_certificates: int = 0
    organized_events: int = 0
    upcoming_events: int = 0
    past_events: int = 0
    unread_notifications: int = 0


class DashboardStatistics(BaseModel):
    total_events_attended: int = 0
    total_certificates: int = 0
    events_this_month: int = 0


class FullProfile(BaseModel):
    user: User
    profile: Profile
    notification_preferences: NotificationPreferences
    statistics: ProfileStatistics


class UpcomingRegistration(BaseModel):
    registration_id: str
    event_id: str
    title: str
    start_date: datetime
    location: str
    image_url: Optional[str] = None
    registration_date: datetime
    qr_code: str


class PersonalDashboard(BaseModel):
    upcoming_registrations: List[UpcomingRegistration]
    recent_certificates: List[Certificate]
    recent_notifications: List[Notification]
    statistics: DashboardStatistics
