# app/api/v1/endpoints/profile.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.schemas.activity import UserActivity
from app.schemas.common import Message, Page
from app.schemas.profile import (
    DeactivationRequest,
    EmailChange,
    FullProfile,
    NotificationPreferences,
    NotificationPreferencesUpdate,
    PasswordChange,
    PersonalDashboard,
    Profile,
    ProfileImage,
    ProfileUpdate,
)
from app.schemas.token import Principal
from app.schemas.user import User
from app.services import activity_service, profile_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=FullProfile)
def get_profile(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """The caller's account, profile, notification preferences and statistics."""
    return profile_service.get_profile(db, actor=current_user)


@router.put("/personal", response_model=Profile)
def update_personal_data(
    profile_in: ProfileUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return profile_service.update_personal_data(
        db,
        actor=current_user,
        profile_in=profile_in,
        request_meta=deps.get_request_meta(request),
    )


@router.put("/password", response_model=Message)
def change_password(
    body: PasswordChange,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    profile_service.change_password(
        db,
        actor=current_user,
        current_password=body.current_password,
        new_password=body.new_password,
        request_meta=deps.get_request_meta(request),
    )
    return Message(message="Password updated")


@router.put("/email", response_model=User)
def change_email(
    body: EmailChange,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """Existing access tokens keep the old email claim until they expire."""
    return profile_service.change_email(
        db,
        actor=current_user,
        new_email=body.new_email,
        password=body.password,
        request_meta=deps.get_request_meta(request),
    )


@router.put("/notifications", response_model=NotificationPreferences)
def update_notification_preferences(
    preferences_in: NotificationPreferencesUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return profile_service.update_notification_preferences(
        db,
        actor=current_user,
        preferences_in=preferences_in,
        request_meta=deps.get_request_meta(request),
    )


@router.put("/image", response_model=Profile)
def set_profile_image(
    body: ProfileImage,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return profile_service.set_profile_image(
        db,
        actor=current_user,
        image_url=body.image_url,
        request_meta=deps.get_request_meta(request),
    )


@router.delete("/image", response_model=Profile)
def remove_profile_image(
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return profile_service.set_profile_image(
        db,
        actor=current_user,
        image_url=None,
        request_meta=deps.get_request_meta(request),
    )


@router.get("/activity", response_model=Page[UserActivity])
def get_activity(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return activity_service.get_user_activities(
        db, user_id=current_user.user_id, page=page, limit=limit
    )


@router.get("/dashboard", response_model=PersonalDashboard)
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return profile_service.get_dashboard(db, actor=current_user)


@router.delete("", response_model=Message)
def request_deactivation(
    body: DeactivationRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """Files a deactivation request for an administrator to review."""
    profile_service.request_deactivation(
        db,
        actor=current_user,
        password=body.password,
        reason=body.reason,
        request_meta=deps.get_request_meta(request),
    )
    return Message(message="Deactivation request recorded. An administrator will review it.")
