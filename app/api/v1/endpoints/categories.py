# app/api/v1/endpoints/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app import crud
from app.db.session import get_db
from app.schemas.category import Category

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[Category])
def list_categories(db: Session = Depends(get_db)):
    return crud.category.get_all_ordered(db)
