# app/crud/crud_category.py
from typing import List, Optional

from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.category import Category
from app.schemas.category import CategoryCreate


class CRUDCategory(CRUDBase[Category, CategoryCreate, CategoryCreate]):
    def get_by_name(self, db: Session, *, name: str) -> Optional[Category]:
        return db.query(self.model).filter(self.model.name == name).first()

    def get_all_ordered(self, db: Session) -> List[Category]:
        return db.query(self.model).order_by(self.model.name.asc()).all()


category = CRUDCategory(Category)
