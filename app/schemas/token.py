# app/schemas/token.py
from typing import Optional

from pydantic import BaseModel


class TokenPayload(BaseModel):
    sub: str
    email: Optional[str] = None
    role: Optional[int] = None
    type: str = "access"
    exp: Optional[int] = None


class Principal(BaseModel):
    """The authenticated caller, handed explicitly to every service call."""

    user_id: str
    email: str
    role: int


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
