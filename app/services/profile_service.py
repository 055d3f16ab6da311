# app/services/profile_service.py
import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app import crud
from app.core.exceptions import ConflictError, InternalError, InvalidError, NotFoundError
from app.core.security import get_password_hash, verify_password
from app.models.certificate import Certificate
from app.models.event import Event
from app.models.notification import Notification
from app.models.registration import EventRegistration
from app.models.user import User
from app.schemas.certificate import Certificate as CertificateSchema
from app.schemas.notification import Notification as NotificationSchema
from app.schemas.profile import (
    DashboardStatistics,
    FullProfile,
    NotificationPreferences as NotificationPreferencesSchema,
    NotificationPreferencesUpdate,
    PersonalDashboard,
    Profile as ProfileSchema,
    ProfileStatistics,
    ProfileUpdate,
    UpcomingRegistration,
)
from app.schemas.token import Principal
from app.schemas.user import User as UserSchema
from app.services import activity_service
from app.services.notification_service import notify_safely
from app.utils.dates import month_start, utcnow

logger = logging.getLogger(__name__)

RequestMeta = Optional[Dict[str, Optional[str]]]


def _get_user(db: Session, user_id: str) -> User:
    user = crud.user.get(db, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    return user


def _check_password(user: User, password: str) -> None:
    if not verify_password(password, user.password_hash):
        raise InvalidError("Incorrect password", code="INVALID_PASSWORD")


def _count(db: Session, model, *criteria) -> int:
    return db.query(func.count(model.id)).filter(*criteria).scalar() or 0


def _commit(db: Session, action: str, user_id: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to {action} for user {user_id}",
            exc_info=True,
            extra={"user_id": user_id},
        )
        db.rollback()
        raise InternalError(f"Could not {action}")


def get_profile(
    db: Session, *, actor: Principal, now: Optional[datetime] = None
) -> FullProfile:
    now = now or utcnow()
    user = _get_user(db, actor.user_id)
    profile = crud.user_profile.get_by_user(db, user_id=user.id)
    preferences = crud.notification_preferences.get_by_user(db, user_id=user.id)

    statistics = ProfileStatistics(
        total_registrations=_count(db, EventRegistration, EventRegistration.user_id == user.id),
        total_certificates=_count(db, Certificate, Certificate.user_id == user.id),
        organized_events=_count(db, Event, Event.organizer_id == user.id),
        upcoming_events=_count(
            db,
            EventRegistration,
            EventRegistration.user_id == user.id,
            EventRegistration.status == "registered",
            EventRegistration.event.has(Event.start_date >= now),
        ),
        past_events=_count(
            db,
            EventRegistration,
            EventRegistration.user_id == user.id,
            EventRegistration.status == "attended",
            EventRegistration.event.has(Event.end_date < now),
        ),
        unread_notifications=crud.notification.count_unread(db, user_id=user.id),
    )

    return FullProfile(
        user=UserSchema.model_validate(user),
        profile=ProfileSchema.model_validate(profile) if profile else ProfileSchema(),
        notification_preferences=(
            NotificationPreferencesSchema.model_validate(preferences)
            if preferences
            else NotificationPreferencesSchema()
        ),
        statistics=statistics,
    )


def update_personal_data(
    db: Session, *, actor: Principal, profile_in: ProfileUpdate, request_meta: RequestMeta = None
) -> ProfileSchema:
    values = profile_in.model_dump(exclude_unset=True)
    profile = crud.user_profile.upsert(db, user_id=actor.user_id, values=values)
    activity_service.log_activity(
        db,
        user_id=actor.user_id,
        activity_type="profile_updated",
        description="Updated personal information",
        related_type="user",
        related_id=actor.user_id,
        metadata={"fields": sorted(values)},
        request_meta=request_meta,
    )
    _commit(db, "update the profile", actor.user_id)
    db.refresh(profile)
    return ProfileSchema.model_validate(profile)


def change_password(
    db: Session,
    *,
    actor: Principal,
    current_password: str,
    new_password: str,
    request_meta: RequestMeta = None,
) -> None:
    user = _get_user(db, actor.user_id)
    _check_password(user, current_password)
    if verify_password(new_password, user.password_hash):
        raise InvalidError(
            "The new password must be different from the current one", code="SAME_PASSWORD"
        )

    user.password_hash = get_password_hash(new_password)
    activity_service.log_activity(
        db,
        user_id=user.id,
        activity_type="password_changed",
        description="Changed account password",
        related_type="user",
        related_id=user.id,
        request_meta=request_meta,
    )
    _commit(db, "change the password", user.id)

    notify_safely(
        db,
        user_id=user.id,
        kind="security",
        title="Password changed",
        message="Your password was changed. If this wasn't you, contact an administrator.",
        related_type="user",
        related_id=user.id,
    )


def change_email(
    db: Session,
    *,
    actor: Principal,
    new_email: str,
    password: str,
    request_meta: RequestMeta = None,
) -> User:
    user = _get_user(db, actor.user_id)
    _check_password(user, password)
    new_email = new_email.lower()
    if new_email == user.email.lower():
        raise InvalidError("The new email must be different from the current one", code="SAME_EMAIL")
    if crud.user.get_by_email(db, email=new_email) is not None:
        raise ConflictError("This email address is already registered", code="EMAIL_TAKEN")

    old_email = user.email
    user.email = new_email
    activity_service.log_activity(
        db,
        user_id=user.id,
        activity_type="email_updated",
        description="Changed account email",
        related_type="user",
        related_id=user.id,
        metadata={"old_email": old_email, "new_email": new_email},
        request_meta=request_meta,
    )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("This email address is already registered", code="EMAIL_TAKEN")

    db.refresh(user)
    notify_safely(
        db,
        user_id=user.id,
        kind="security",
        title="Email updated",
        message=f"Your account email was changed to {new_email}.",
        related_type="user",
        related_id=user.id,
    )
    return user


def update_notification_preferences(
    db: Session,
    *,
    actor: Principal,
    preferences_in: NotificationPreferencesUpdate,
    request_meta: RequestMeta = None,
) -> NotificationPreferencesSchema:
    values = preferences_in.model_dump(exclude_unset=True, exclude_none=True)
    preferences = crud.notification_preferences.upsert(db, user_id=actor.user_id, values=values)
    activity_service.log_activity(
        db,
        user_id=actor.user_id,
        activity_type="notification_preferences_updated",
        description="Updated notification preferences",
        related_type="user",
        related_id=actor.user_id,
        metadata=values,
        request_meta=request_meta,
    )
    _commit(db, "update notification preferences", actor.user_id)
    db.refresh(preferences)
    return NotificationPreferencesSchema.model_validate(preferences)


def set_profile_image(
    db: Session, *, actor: Principal, image_url: Optional[str], request_meta: RequestMeta = None
) -> ProfileSchema:
    """Sets the image URL, or clears it when `image_url` is None."""
    profile = crud.user_profile.upsert(
        db, user_id=actor.user_id, values={"profile_image_url": image_url}
    )
    removed = image_url is None
    activity_service.log_activity(
        db,
        user_id=actor.user_id,
        activity_type="profile_image_removed" if removed else "profile_image_updated",
        description="Removed profile image" if removed else "Updated profile image",
        related_type="user",
        related_id=actor.user_id,
        request_meta=request_meta,
    )
    _commit(db, "update the profile image", actor.user_id)
    db.refresh(profile)
    return ProfileSchema.model_validate(profile)


def get_dashboard(
    db: Session, *, actor: Principal, now: Optional[datetime] = None
) -> PersonalDashboard:
    now = now or utcnow()
    user_id = actor.user_id

    upcoming = (
        db.query(EventRegistration, Event)
        .join(Event, EventRegistration.event_id == Event.id)
        .filter(
            EventRegistration.user_id == user_id,
            EventRegistration.status == "registered",
            Event.start_date >= now,
        )
        .order_by(Event.start_date.asc())
        .limit(5)
        .all()
    )
    certificates = crud.certificate.get_recent_issued_by_user(db, user_id=user_id, limit=5)
    notifications = (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(5)
        .all()
    )

    return PersonalDashboard(
        upcoming_registrations=[
            UpcomingRegistration(
                registration_id=registration.id,
                event_id=event.id,
                title=event.title,
                start_date=event.start_date,
                location=event.location,
                image_url=event.image_url,
                registration_date=registration.registration_date,
                qr_code=registration.qr_code,
            )
            for registration, event in upcoming
        ],
        recent_certificates=[CertificateSchema.model_validate(c) for c in certificates],
        recent_notifications=[NotificationSchema.model_validate(n) for n in notifications],
        statistics=DashboardStatistics(
            total_events_attended=_count(
                db,
                EventRegistration,
                EventRegistration.user_id == user_id,
                EventRegistration.status == "attended",
            ),
            total_certificates=_count(
                db, Certificate, Certificate.user_id == user_id, Certificate.status == "issued"
            ),
            events_this_month=_count(
                db,
                EventRegistration,
                EventRegistration.user_id == user_id,
                EventRegistration.status == "registered",
                EventRegistration.registration_date >= month_start(now),
            ),
        ),
    )


def request_deactivation(
    db: Session,
    *,
    actor: Principal,
    password: str,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
    request_meta: RequestMeta = None,
) -> None:
    """Records the request for an administrator to act on; the account stays active."""
    now = now or utcnow()
    user = _get_user(db, actor.user_id)
    _check_password(user, password)

    upcoming_organized = _count(
        db,
        Event,
        Event.organizer_id == user.id,
        Event.start_date >= now,
        Event.is_active.is_(True),
    )
    if upcoming_organized > 0:
        raise InvalidError(
            "You cannot deactivate your account while you organize upcoming events",
            code="HAS_UPCOMING_EVENTS",
            details={"upcoming_events": upcoming_organized},
        )

    activity_service.log_activity(
        db,
        user_id=user.id,
        activity_type="account_deactivation_requested",
        description="Requested account deactivation",
        related_type="user",
        related_id=user.id,
        metadata={"reason": reason or "Not specified"},
        request_meta=request_meta,
    )
    _commit(db, "record the deactivation request", user.id)
