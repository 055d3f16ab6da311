# app/crud/crud_user.py
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.security import get_password_hash
from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return (
            db.query(self.model)
            .filter(func.lower(self.model.email) == email.lower())
            .first()
        )

    def create(
        self, db: Session, *, obj_in: UserCreate, role_id: int, commit: bool = True
    ) -> User:
        db_obj = User(
            name=obj_in.name,
            email=obj_in.email.lower(),
            password_hash=get_password_hash(obj_in.password),
            role_id=role_id,
        )
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def get_multi_filtered(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: int = 20,
        search: Optional[str] = None,
        role_id: Optional[int] = None,
    ) -> Tuple[List[User], int]:
        query = db.query(self.model)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(self.model.name.ilike(pattern), self.model.email.ilike(pattern))
            )
        if role_id is not None:
            query = query.filter(self.model.role_id == role_id)

        total = query.count()
        users = (
            query.order_by(self.model.created_at.desc()).offset(skip).limit(limit).all()
        )
        return users, total


user = CRUDUser(User)
