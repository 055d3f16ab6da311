# app/crud/__init__.py

from .crud_activity import user_activity
from .crud_category import category
from .crud_certificate import certificate
from .crud_event import event
from .crud_notification import notification
from .crud_profile import notification_preferences, user_profile
from .crud_registration import registration
from .crud_session import event_session
from .crud_user import user
