# app/schemas/category.py
from typing import Optional

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class Category(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    color: Optional[str] = None

    model_config = {"from_attributes": True}
