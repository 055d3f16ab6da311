# app/services/user_service.py
"""Account administration: the /users endpoints and the admin-only actions."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app import crud
from app.core.config import settings
from app.core.exceptions import ConflictError, InternalError, InvalidError, NotFoundError
from app.core.permissions import Action, RoleId, authorize, is_admin
from app.core.security import get_password_hash
from app.models.certificate import Certificate
from app.models.event import Event
from app.models.registration import EventRegistration
from app.models.user import User
from app.schemas.common import Page, Pagination
from app.schemas.token import Principal
from app.schemas.user import User as UserSchema, UserCreate, UserDetail, UserUpdate
from app.services import activity_service
from app.services.notification_service import notify_safely

logger = logging.getLogger(__name__)


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = crud.user.get(db, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    return user


def _require_role(db: Session, role_id: int) -> None:
    if role_id not in {r.value for r in RoleId}:
        raise InvalidError("Unknown role", code="INVALID_ROLE", details={"role_id": role_id})


def list_users(
    db: Session,
    *,
    actor: Principal,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    role_id: Optional[int] = None,
) -> Page[UserSchema]:
    authorize(Action.MANAGE_USERS, actor)
    users, total = crud.user.get_multi_filtered(
        db, skip=(page - 1) * limit, limit=limit, search=search, role_id=role_id
    )
    return Page[UserSchema](
        data=[UserSchema.model_validate(u) for u in users],
        pagination=Pagination.build(page, limit, total),
    )


def get_user(db: Session, *, user_id: str, actor: Principal) -> User:
    authorize(
        Action.VIEW_USER, actor, [user_id], message="You are not allowed to view this profile"
    )
    return _get_user_or_404(db, user_id)


def create_user(db: Session, *, user_in: UserCreate, actor: Principal) -> User:
    authorize(Action.MANAGE_USERS, actor)
    role_id = user_in.role_id or settings.DEFAULT_ROLE_ID
    _require_role(db, role_id)
    if crud.user.get_by_email(db, email=user_in.email):
        raise ConflictError("This email address is already registered", code="EMAIL_TAKEN")

    try:
        user = crud.user.create(db, obj_in=user_in, role_id=role_id)
    except IntegrityError:
        db.rollback()
        raise ConflictError("This email address is already registered", code="EMAIL_TAKEN")
    logger.info(f"User {user.id} created by admin {actor.user_id}")
    return user


def update_user(
    db: Session, *, user_id: str, user_in: UserUpdate, actor: Principal
) -> User:
    authorize(
        Action.VIEW_USER, actor, [user_id], message="You are not allowed to update this profile"
    )
    user = _get_user_or_404(db, user_id)
    update_data: Dict[str, Any] = user_in.model_dump(exclude_unset=True, exclude_none=True)

    if "role_id" in update_data and update_data["role_id"] != user.role_id:
        if not is_admin(actor):
            raise InvalidError(
                "Only an administrator can change a user's role", code="ROLE_CHANGE_FORBIDDEN"
            )
        _require_role(db, update_data["role_id"])

    if "email" in update_data:
        update_data["email"] = update_data["email"].lower()
        other = crud.user.get_by_email(db, email=update_data["email"])
        if other is not None and other.id != user.id:
            raise ConflictError("This email address is already registered", code="EMAIL_TAKEN")

    try:
        return crud.user.update(db, db_obj=user, obj_in=update_data)
    except IntegrityError:
        db.rollback()
        raise ConflictError("This email address is already registered", code="EMAIL_TAKEN")


def delete_user(db: Session, *, user_id: str, actor: Principal) -> None:
    authorize(Action.MANAGE_USERS, actor)
    _get_user_or_404(db, user_id)
    try:
        crud.user.remove(db, id=user_id)
    except IntegrityError:
        db.rollback()
        raise ConflictError(
            "This user owns events or registrations and cannot be deleted; deactivate it instead",
            code="USER_HAS_RECORDS",
        )
    logger.info(f"User {user_id} deleted by admin {actor.user_id}")


def reset_password(
    db: Session,
    *,
    user_id: str,
    new_password: str,
    actor: Principal,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
) -> None:
    authorize(Action.MANAGE_USERS, actor)
    user = _get_user_or_404(db, user_id)

    try:
        user.password_hash = get_password_hash(new_password)
        activity_service.log_activity(
            db,
            user_id=actor.user_id,
            activity_type="admin_password_reset",
            description=f"Reset the password of {user.name} ({user.email})",
            related_type="user",
            related_id=user.id,
            metadata={"target_user_id": user.id},
            request_meta=request_meta,
        )
        activity_service.log_activity(
            db,
            user_id=user.id,
            activity_type="password_reset_by_admin",
            description="An administrator reset your password",
            related_type="user",
            related_id=user.id,
            metadata={"admin_id": actor.user_id},
        )
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to reset password for user {user_id}",
            exc_info=True,
            extra={"user_id": user_id, "admin_id": actor.user_id},
        )
        db.rollback()
        raise InternalError("Could not reset the password")

    notify_safely(
        db,
        user_id=user.id,
        kind="security",
        title="Password reset",
        message="An administrator has reset your password. We recommend changing it right away.",
        related_type="user",
        related_id=user.id,
    )


def toggle_status(
    db: Session,
    *,
    user_id: str,
    action: str,
    actor: Principal,
    reason: Optional[str] = None,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
) -> User:
    authorize(Action.MANAGE_USERS, actor)
    user = _get_user_or_404(db, user_id)
    if action == "deactivate" and user.role_id == RoleId.ADMIN:
        raise InvalidError("Administrators cannot be deactivated", code="CANNOT_DEACTIVATE_ADMIN")

    activate = action == "activate"
    try:
        user.is_active = activate
        activity_service.log_activity(
            db,
            user_id=actor.user_id,
            activity_type=f"admin_user_{action}",
            description=f"{'Activated' if activate else 'Deactivated'} the account of {user.name}",
            related_type="user",
            related_id=user.id,
            metadata={"target_user_id": user.id, "reason": reason or "Not specified"},
            request_meta=request_meta,
        )
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to {action} user {user_id}",
            exc_info=True,
            extra={"user_id": user_id, "admin_id": actor.user_id},
        )
        db.rollback()
        raise InternalError("Could not change the account status")

    db.refresh(user)
    notify_safely(
        db,
        user_id=user.id,
        kind="account",
        title="Account activated" if activate else "Account deactivated",
        message=(
            "Your account has been activated by an administrator."
            if activate
            else "Your account has been deactivated by an administrator."
        ),
        related_type="user",
        related_id=user.id,
    )
    return user


def get_user_detail(db: Session, *, user_id: str, actor: Principal) -> UserDetail:
    authorize(Action.MANAGE_USERS, actor)
    user = _get_user_or_404(db, user_id)

    def count(model, *criteria) -> int:
        return db.query(func.count(model.id)).filter(*criteria).scalar() or 0

    return UserDetail(
        **UserSchema.model_validate(user).model_dump(),
        registrations_count=count(EventRegistration, EventRegistration.user_id == user.id),
        organized_events_count=count(Event, Event.organizer_id == user.id),
        certificates_count=count(Certificate, Certificate.user_id == user.id),
    )


def get_user_activity(
    db: Session, *, user_id: str, actor: Principal, page: int = 1, limit: int = 20
):
    authorize(Action.MANAGE_USERS, actor)
    _get_user_or_404(db, user_id)
    return activity_service.get_user_activities(db, user_id=user_id, page=page, limit=limit)
