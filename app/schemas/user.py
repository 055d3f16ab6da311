# app/schemas/user.py
import re
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

# At least one lowercase letter, one uppercase letter and one digit
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d]{8,}$")


def check_password_strength(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(
            "Password must be at least 8 characters and contain a lowercase letter, "
            "an uppercase letter and a digit"
        )
    return value


class UserRegister(BaseModel):
    name: str = Field(..., min_length=2, max_length=120, json_schema_extra={"example": "Ana Torres"})
    email: EmailStr = Field(..., json_schema_extra={"example": "ana@university.edu"})
    password: str
    password_confirm: str

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password_strength(value)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password_confirm:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role_id: Optional[int] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=120)
    email: Optional[EmailStr] = None
    role_id: Optional[int] = None


class PasswordReset(BaseModel):
    new_password: str = Field(..., min_length=8)


class UserStatusToggle(BaseModel):
    action: Literal["activate", "deactivate"]
    reason: Optional[str] = Field(None, max_length=500)


class User(BaseModel):
    id: str
    name: str
    email: str
    role_id: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserWithToken(BaseModel):
    user: User
    access_token: str
    token_type: str = "bearer"


class UserDetail(User):
    registrations_count: int = 0
    organized_events_count: int = 0
    certificates_count: int = 0
