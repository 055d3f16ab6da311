# app/api/v1/endpoints/users.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.schemas.activity import UserActivity
from app.schemas.common import Message, Page
from app.schemas.registration import RegistrationStatus, UserRegistrationItem
from app.schemas.token import Principal
from app.schemas.user import (
    PasswordReset,
    User,
    UserCreate,
    UserDetail,
    UserStatusToggle,
    UserUpdate,
)
from app.services import registration_service, user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=Page[User])
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    role_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ADMIN]** List accounts."""
    return user_service.list_users(
        db, actor=current_user, page=page, limit=limit, search=search, role_id=role_id
    )


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ADMIN]** Create an account; the role defaults to a regular user."""
    return user_service.create_user(db, user_in=user_in, actor=current_user)


@router.get("/{user_id}", response_model=User)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return user_service.get_user(db, user_id=user_id, actor=current_user)


@router.put("/{user_id}", response_model=User)
def update_user(
    user_id: str,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """Admins can update anyone; users only themselves and never their role."""
    return user_service.update_user(db, user_id=user_id, user_in=user_in, actor=current_user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    user_service.delete_user(db, user_id=user_id, actor=current_user)


@router.get("/{user_id}/detail", response_model=UserDetail)
def get_user_detail(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ADMIN]** Account with its registration, event and certificate counts."""
    return user_service.get_user_detail(db, user_id=user_id, actor=current_user)


@router.get("/{user_id}/activity", response_model=Page[UserActivity])
def get_user_activity(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ADMIN]** Activity history of any account."""
    return user_service.get_user_activity(
        db, user_id=user_id, actor=current_user, page=page, limit=limit
    )


@router.post("/{user_id}/reset-password", response_model=Message)
def reset_password(
    user_id: str,
    body: PasswordReset,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ADMIN]** Set a new password for an account."""
    user_service.reset_password(
        db,
        user_id=user_id,
        new_password=body.new_password,
        actor=current_user,
        request_meta=deps.get_request_meta(request),
    )
    return Message(message="Password reset successfully")


@router.post("/{user_id}/toggle-status", response_model=User)
def toggle_status(
    user_id: str,
    body: UserStatusToggle,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ADMIN]** Activate or deactivate an account. Administrators cannot be deactivated."""
    return user_service.toggle_status(
        db,
        user_id=user_id,
        action=body.action,
        reason=body.reason,
        actor=current_user,
        request_meta=deps.get_request_meta(request),
    )


@router.get("/{user_id}/registrations", response_model=Page[UserRegistrationItem])
def list_user_registrations(
    user_id: str,
    status_filter: Optional[RegistrationStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """A user's registrations, each annotated with the event's current status."""
    return registration_service.list_user_registrations(
        db,
        user_id=user_id,
        actor=current_user,
        status=status_filter.value if status_filter else None,
        page=page,
        limit=limit,
    )
