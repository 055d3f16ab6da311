# app/services/auth_service.py
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app import crud
from app.core.config import settings
from app.core.exceptions import ConflictError, UnauthorizedError
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from app.models.user import User
from app.schemas.user import UserCreate, UserRegister
from app.services import activity_service

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user: User
    access_token: str
    refresh_token: str


def _issue_tokens(user: User) -> AuthResult:
    return AuthResult(
        user=user,
        access_token=create_access_token(user.id, user.email, user.role_id),
        refresh_token=create_refresh_token(user.id),
    )


def register(
    db: Session,
    *,
    user_in: UserRegister,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
) -> AuthResult:
    """Self-service sign-up. The account always gets the default role."""
    if crud.user.get_by_email(db, email=user_in.email):
        raise ConflictError("This email address is already registered", code="EMAIL_TAKEN")

    try:
        user = crud.user.create(
            db,
            obj_in=UserCreate(name=user_in.name, email=user_in.email, password=user_in.password),
            role_id=settings.DEFAULT_ROLE_ID,
        )
    except IntegrityError:
        db.rollback()
        raise ConflictError("This email address is already registered", code="EMAIL_TAKEN")

    activity_service.log_activity(
        db,
        user_id=user.id,
        activity_type="account_created",
        description="Created an account",
        related_type="user",
        related_id=user.id,
        request_meta=request_meta,
        commit=True,
    )
    logger.info(f"New account registered: {user.id}")
    return _issue_tokens(user)


def login(
    db: Session,
    *,
    email: str,
    password: str,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
) -> AuthResult:
    user = crud.user.get_by_email(db, email=email)
    # Same answer for unknown email, wrong password and disabled account
    if user is None or not verify_password(password, user.password_hash) or not user.is_active:
        raise UnauthorizedError("Invalid credentials", code="INVALID_CREDENTIALS")

    activity_service.log_activity(
        db,
        user_id=user.id,
        activity_type="login",
        description="Signed in",
        related_type="user",
        related_id=user.id,
        request_meta=request_meta,
        commit=True,
    )
    return _issue_tokens(user)


def refresh(db: Session, *, refresh_token: Optional[str]) -> str:
    """Exchanges a refresh token for a new access token."""
    if not refresh_token:
        raise UnauthorizedError("Refresh token not provided", code="INVALID_REFRESH_TOKEN")
    try:
        payload = decode_token(refresh_token)
    except JWTError:
        raise UnauthorizedError("Invalid or expired refresh token", code="INVALID_REFRESH_TOKEN")
    if payload.get("type") != "refresh":
        raise UnauthorizedError("Invalid or expired refresh token", code="INVALID_REFRESH_TOKEN")

    user = crud.user.get(db, payload.get("sub"))
    if user is None or not user.is_active:
        raise UnauthorizedError("User not found", code="INVALID_REFRESH_TOKEN")
    return create_access_token(user.id, user.email, user.role_id)
