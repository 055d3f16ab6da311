# app/crud/crud_notification.py
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.notification import Notification
from app.schemas.notification import Notification as NotificationSchema


class CRUDNotification(CRUDBase[Notification, NotificationSchema, NotificationSchema]):
    def get_for_user(
        self, db: Session, *, notification_id: str, user_id: str
    ) -> Optional[Notification]:
        return (
            db.query(self.model)
            .filter(self.model.id == notification_id, self.model.user_id == user_id)
            .first()
        )

    def get_multi_by_user(
        self, db: Session, *, user_id: str, limit: int = 10, unread_only: bool = False
    ) -> List[Notification]:
        query = db.query(self.model).filter(self.model.user_id == user_id)
        if unread_only:
            query = query.filter(self.model.is_read.is_(False))
        return query.order_by(self.model.created_at.desc()).limit(limit).all()

    def count_unread(self, db: Session, *, user_id: str) -> int:
        return (
            db.query(func.count(self.model.id))
            .filter(self.model.user_id == user_id, self.model.is_read.is_(False))
            .scalar()
        )


notification = CRUDNotification(Notification)
