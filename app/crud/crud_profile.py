# app/crud/crud_profile.py
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.user_profile import NotificationPreferences, UserProfile
from app.schemas.profile import NotificationPreferencesUpdate, ProfileUpdate


class CRUDUserProfile(CRUDBase[UserProfile, ProfileUpdate, ProfileUpdate]):
    def get_by_user(self, db: Session, *, user_id: str) -> Optional[UserProfile]:
        return db.query(self.model).filter(self.model.user_id == user_id).first()

    def upsert(self, db: Session, *, user_id: str, values: Dict[str, Any]) -> UserProfile:
        """Creates the profile on first write. The caller commits."""
        db_obj = self.get_by_user(db, user_id=user_id)
        if db_obj is None:
            db_obj = self.model(user_id=user_id)
            db.add(db_obj)
        for field, value in values.items():
            setattr(db_obj, field, value)
        db.flush()
        return db_obj


class CRUDNotificationPreferences(
    CRUDBase[NotificationPreferences, NotificationPreferencesUpdate, NotificationPreferencesUpdate]
):
    def get_by_user(self, db: Session, *, user_id: str) -> Optional[NotificationPreferences]:
        return db.query(self.model).filter(self.model.user_id == user_id).first()

    def upsert(
        self, db: Session, *, user_id: str, values: Dict[str, Any]
    ) -> NotificationPreferences:
        db_obj = self.get_by_user(db, user_id=user_id)
        if db_obj is None:
            db_obj = self.model(user_id=user_id)
            db.add(db_obj)
        for field, value in values.items():
            setattr(db_obj, field, value)
        db.flush()
        return db_obj


user_profile = CRUDUserProfile(UserProfile)
notification_preferences = CRUDNotificationPreferences(NotificationPreferences)
