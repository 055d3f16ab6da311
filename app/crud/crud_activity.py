# app/crud/crud_activity.py
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.user_activity import UserActivity
from app.schemas.activity import UserActivity as UserActivitySchema


class CRUDUserActivity(CRUDBase[UserActivity, UserActivitySchema, UserActivitySchema]):
    def get_multi_by_user(
        self, db: Session, *, user_id: str, skip: int = 0, limit: int = 20
    ) -> Tuple[List[UserActivity], int]:
        query = db.query(self.model).filter(self.model.user_id == user_id)
        total = query.count()
        items = (
            query.order_by(self.model.created_at.desc()).offset(skip).limit(limit).all()
        )
        return items, total


user_activity = CRUDUserActivity(UserActivity)
