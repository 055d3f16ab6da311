# app/models/__init__.py
# Import all models to ensure SQLAlchemy can resolve relationships

from app.db.base_class import Base
from app.models.role import Role
from app.models.user import User
from app.models.user_profile import UserProfile, NotificationPreferences
from app.models.category import Category
from app.models.event import Event
from app.models.event_session import EventSession
from app.models.registration import EventRegistration, SessionRegistration
from app.models.certificate import Certificate
from app.models.notification import Notification
from app.models.user_activity import UserActivity

__all__ = [
    "Base",
    "Role",
    "User",
    "UserProfile",
    "NotificationPreferences",
    "Category",
    "Event",
    "EventSession",
    "EventRegistration",
    "SessionRegistration",
    "Certificate",
    "Notification",
    "UserActivity",
]
