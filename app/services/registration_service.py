# app/services/registration_service.py
"""
Registration workflow: register, cancel, check-in, check-out and the reads
around them.

Each write follows the same shape: validate against a fresh read, then one
transaction in which the capacity counters are re-checked by conditional
UPDATEs. Notifications are created after the commit and emails are handed
back to the caller for background delivery; neither can undo the write.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app import crud
from app.core.config import settings
from app.core.exceptions import (
    AppError,
    ConflictError,
    InternalError,
    InvalidError,
    NotFoundError,
)
from app.core.permissions import Action, authorize
from app.models.event import Event
from app.models.event_session import EventSession
from app.models.registration import EventRegistration
from app.schemas.common import Page, Pagination
from app.schemas.registration import (
    AttendanceResult,
    BulkCheckInItem,
    BulkCheckInResult,
    BulkCheckInSummary,
    EventRegistrationItem,
    Registration,
    RegistrationDetail,
    RegistrationEventSummary,
    RegistrationParticipant,
    RegistrationResult,
    RegistrationStats,
    UserRegistrationItem,
)
from app.schemas.session import EventSession as EventSessionSchema
from app.schemas.token import Principal
from app.services import activity_service
from app.services.event_service import available_slots
from app.services.notification_service import notify_safely
from app.utils.dates import get_event_status, hours_until, is_event_ongoing, utcnow
from app.utils.qr import generate_qr_data

logger = logging.getLogger(__name__)


@dataclass
class WorkflowOutcome:
    """A committed result plus the email (keyword arguments) to send afterwards."""

    result: Any
    email: Optional[Dict[str, Any]] = None


def _session_refs(sessions: List[EventSession]) -> List[Dict[str, str]]:
    return [{"id": s.id, "title": s.title} for s in sessions]


def _format_event_date(moment: datetime) -> str:
    return moment.strftime("%A, %d %B %Y at %H:%M UTC")


def register_to_event(
    db: Session,
    *,
    event_id: str,
    actor: Principal,
    session_ids: Optional[List[str]] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
) -> WorkflowOutcome:
    now = now or utcnow()
    # Preserve order, drop repeats
    session_ids = list(dict.fromkeys(session_ids or []))

    event = crud.event.get_active(db, event_id=event_id)
    if event is None:
        raise NotFoundError("Event not found or inactive", code="EVENT_NOT_FOUND")

    if now >= event.start_date:
        raise InvalidError(
            "Registration is closed because the event has already started",
            code="ALREADY_STARTED",
        )

    count_before = event.current_registrations
    if count_before >= event.max_capacity:
        raise InvalidError(
            "The event has reached its maximum capacity",
            code="EVENT_FULL",
            details={"max_capacity": event.max_capacity},
        )

    existing = crud.registration.get_by_user_and_event(
        db, user_id=actor.user_id, event_id=event.id
    )
    if existing is not None:
        message = (
            "Your registration was cancelled. Contact the organizer to register again."
            if existing.status == "cancelled"
            else "You are already registered for this event"
        )
        raise ConflictError(
            message,
            code="ALREADY_REGISTERED",
            details={
                "id": existing.id,
                "status": existing.status,
                "registration_date": existing.registration_date.isoformat(),
            },
        )

    sessions: List[EventSession] = []
    if session_ids:
        sessions = crud.event_session.get_registrable(
            db, event_id=event.id, session_ids=session_ids
        )
        found = {s.id for s in sessions}
        invalid = [sid for sid in session_ids if sid not in found]
        if invalid:
            raise InvalidError(
                "Some sessions are not valid for this event or do not take registrations",
                code="INVALID_SESSION",
                details={"invalid_session_ids": invalid},
            )
        # Keep the caller's order
        sessions.sort(key=lambda s: session_ids.index(s.id))

        full = [
            s
            for s in sessions
            if s.max_capacity is not None and s.current_registrations >= s.max_capacity
        ]
        if full:
            raise InvalidError(
                "Some sessions are full",
                code="SESSION_FULL",
                details={"full_sessions": _session_refs(full)},
            )

    try:
        if not crud.event.increment_registrations(db, event_id=event.id):
            raise InvalidError(
                "The event has reached its maximum capacity",
                code="EVENT_FULL",
                details={"max_capacity": event.max_capacity},
            )

        full = [
            s
            for s in sessions
            if not crud.event_session.increment_registrations(db, session_id=s.id)
        ]
        if full:
            raise InvalidError(
                "Some sessions are full",
                code="SESSION_FULL",
                details={"full_sessions": _session_refs(full)},
            )

        registration = crud.registration.create_with_sessions(
            db,
            user_id=actor.user_id,
            event_id=event.id,
            session_ids=[s.id for s in sessions],
            notes=notes,
        )
        activity_service.log_activity(
            db,
            user_id=actor.user_id,
            activity_type="event_registered",
            description=f'Registered for event "{event.title}"',
            related_type="event",
            related_id=event.id,
            metadata={
                "event_title": event.title,
                "session_ids": [s.id for s in sessions],
                "qr_code": registration.qr_code,
            },
            request_meta=request_meta,
        )
        db.commit()
    except AppError:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        # A concurrent request for the same (user, event) won the unique key
        logger.warning(
            f"Duplicate registration rejected for user {actor.user_id} on event {event_id}",
            extra={"user_id": actor.user_id, "event_id": event_id},
        )
        raise ConflictError(
            "You are already registered for this event", code="ALREADY_REGISTERED"
        )
    except SQLAlchemyError:
        logger.error(
            f"Failed to register user {actor.user_id} for event {event_id}",
            exc_info=True,
            extra={"user_id": actor.user_id, "event_id": event_id},
        )
        db.rollback()
        raise InternalError("Could not complete the registration")

    db.refresh(registration)
    db.refresh(event)
    for s in sessions:
        db.refresh(s)
    logger.info(
        f"User {actor.user_id} registered for event {event.id} (registration {registration.id})"
    )

    notify_safely(
        db,
        user_id=actor.user_id,
        kind="registration",
        title="Registration confirmed",
        message=f'You have successfully registered for "{event.title}"',
        related_type="event",
        related_id=event.id,
    )

    result = RegistrationResult(
        registration=Registration.model_validate(registration),
        event=RegistrationEventSummary.model_validate(event),
        sessions=[EventSessionSchema.model_validate(s) for s in sessions],
        available_slots=event.max_capacity - (count_before + 1),
        qr_data=generate_qr_data(registration.id, event.id, actor.user_id),
    )

    return WorkflowOutcome(
        result=result, email=_confirmation_email(db, actor.user_id, event, registration, sessions)
    )


def _confirmation_email(
    db: Session,
    user_id: str,
    event: Event,
    registration: EventRegistration,
    sessions: List[EventSession],
) -> Optional[Dict[str, Any]]:
    """Runs after the commit; a failed lookup only costs the email."""
    try:
        user = crud.user.get(db, user_id)
    except SQLAlchemyError:
        logger.error(
            f"Failed to load user {user_id} for the confirmation email of registration {registration.id}",
            exc_info=True,
            extra={"user_id": user_id, "registration_id": registration.id},
        )
        db.rollback()
        return None
    if user is None:
        return None
    return {
        "to_email": user.email,
        "recipient_name": user.name,
        "event_name": event.title,
        "event_date": _format_event_date(event.start_date),
        "qr_code": registration.qr_code,
        "event_location": event.location,
        "session_titles": [s.title for s in sessions],
    }


def cancel_registration(
    db: Session,
    *,
    registration_id: str,
    actor: Principal,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
) -> EventRegistration:
    now = now or utcnow()

    registration = crud.registration.get_active_for_owner(
        db, registration_id=registration_id, user_id=actor.user_id
    )
    if registration is None:
        raise NotFoundError(
            "Registration not found or already cancelled", code="REGISTRATION_NOT_FOUND"
        )

    event: Event = registration.event
    remaining = hours_until(event.start_date, now)
    if remaining < settings.CANCELLATION_WINDOW_HOURS:
        raise InvalidError(
            f"Registrations can only be cancelled up to {settings.CANCELLATION_WINDOW_HOURS} "
            "hours before the event starts",
            code="TOO_LATE",
            details={"hours_until_event": round(remaining, 1)},
        )

    session_ids = [sr.session_id for sr in registration.session_registrations]
    try:
        registration.status = "cancelled"
        registration.cancelled_at = now
        registration.cancellation_reason = reason
        registration.session_registrations.clear()
        crud.event_session.decrement_registrations(db, session_ids=session_ids)
        crud.event.decrement_registrations(db, event_id=event.id)
        activity_service.log_activity(
            db,
            user_id=actor.user_id,
            activity_type="event_cancelled",
            description=f'Cancelled registration for event "{event.title}"',
            related_type="event",
            related_id=event.id,
            metadata={"event_title": event.title, "reason": reason},
            request_meta=request_meta,
        )
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to cancel registration {registration_id}",
            exc_info=True,
            extra={"registration_id": registration_id, "user_id": actor.user_id},
        )
        db.rollback()
        raise InternalError("Could not cancel the registration")

    db.refresh(registration)
    logger.info(f"Registration {registration.id} cancelled by user {actor.user_id}")

    notify_safely(
        db,
        user_id=event.organizer_id,
        kind="cancellation",
        title="Registration cancelled",
        message=f'A participant cancelled their registration for "{event.title}"',
        related_type="event",
        related_id=event.id,
    )
    notify_safely(
        db,
        user_id=actor.user_id,
        kind="cancellation",
        title="Registration cancelled",
        message=f'You have cancelled your registration for "{event.title}"',
        related_type="event",
        related_id=event.id,
    )
    return registration


def _load_for_attendance(
    db: Session, registration_id: str, actor: Principal
) -> EventRegistration:
    registration = crud.registration.get_with_event(db, registration_id=registration_id)
    if registration is None:
        raise NotFoundError("Registration not found", code="REGISTRATION_NOT_FOUND")
    authorize(
        Action.MARK_ATTENDANCE,
        actor,
        [registration.event.organizer_id],
        message="You do not have permission to record attendance for this event",
    )
    return registration


def _attendance_result(
    registration: EventRegistration,
    already_recorded: bool = False,
    certificate_id: Optional[str] = None,
) -> AttendanceResult:
    return AttendanceResult(
        registration_id=registration.id,
        status=registration.status,
        checked_in_at=registration.checked_in_at,
        checked_out_at=registration.checked_out_at,
        already_recorded=already_recorded,
        certificate_id=certificate_id,
    )


def _recorded_check_out(db: Session, registration: EventRegistration) -> AttendanceResult:
    existing = crud.certificate.get_by_registration(db, registration_id=registration.id)
    return _attendance_result(
        registration,
        already_recorded=True,
        certificate_id=existing.id if existing else None,
    )


def _record_check_in(
    db: Session, registration: EventRegistration, now: datetime
) -> AttendanceResult:
    event: Event = registration.event

    if registration.status == "cancelled":
        raise InvalidError(
            "This registration has been cancelled", code="REGISTRATION_NOT_ACTIVE"
        )

    if not is_event_ongoing(event.start_date, event.end_date, now):
        raise InvalidError(
            "Attendance can only be recorded while the event is in progress",
            code="NOT_IN_PROGRESS",
            details={
                "start_date": event.start_date.isoformat(),
                "end_date": event.end_date.isoformat(),
            },
        )

    if registration.checked_in_at is not None:
        return _attendance_result(registration, already_recorded=True)

    try:
        if not crud.registration.mark_checked_in(
            db, registration_id=registration.id, now=now
        ):
            db.rollback()
            db.refresh(registration)
            return _attendance_result(registration, already_recorded=True)
        activity_service.log_activity(
            db,
            user_id=registration.user_id,
            activity_type="event_attended",
            description=f'Checked in to event "{event.title}"',
            related_type="event",
            related_id=event.id,
        )
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to check in registration {registration.id}",
            exc_info=True,
            extra={"registration_id": registration.id},
        )
        db.rollback()
        raise InternalError("Could not record the check-in")

    db.refresh(registration)
    logger.info(f"Registration {registration.id} checked in at {registration.checked_in_at}")
    return _attendance_result(registration)


def check_in(
    db: Session,
    *,
    registration_id: str,
    actor: Principal,
    now: Optional[datetime] = None,
) -> AttendanceResult:
    now = now or utcnow()
    registration = _load_for_attendance(db, registration_id, actor)
    return _record_check_in(db, registration, now)


def check_out(
    db: Session,
    *,
    registration_id: str,
    actor: Principal,
    now: Optional[datetime] = None,
) -> WorkflowOutcome:
    now = now or utcnow()
    registration = _load_for_attendance(db, registration_id, actor)
    event: Event = registration.event

    if registration.checked_in_at is None:
        raise InvalidError(
            "The participant must check in before checking out", code="NOT_CHECKED_IN"
        )

    if registration.checked_out_at is not None:
        return WorkflowOutcome(result=_recorded_check_out(db, registration))

    certificate = None
    try:
        if not crud.registration.mark_checked_out(
            db, registration_id=registration.id, now=now
        ):
            db.rollback()
            db.refresh(registration)
            return WorkflowOutcome(result=_recorded_check_out(db, registration))
        if event.requires_certificate:
            certificate = crud.certificate.create_pending(
                db, registration=registration, event=event
            )
        db.commit()
    except IntegrityError:
        db.rollback()
        # Certificate already issued by a concurrent check-out
        logger.warning(
            f"Concurrent check-out of registration {registration.id}",
            extra={"registration_id": registration.id},
        )
        db.refresh(registration)
        return WorkflowOutcome(result=_recorded_check_out(db, registration))
    except SQLAlchemyError:
        logger.error(
            f"Failed to check out registration {registration.id}",
            exc_info=True,
            extra={"registration_id": registration.id},
        )
        db.rollback()
        raise InternalError("Could not record the check-out")

    db.refresh(registration)
    logger.info(f"Registration {registration.id} checked out at {registration.checked_out_at}")

    email = None
    if certificate is not None:
        db.refresh(certificate)
        notify_safely(
            db,
            user_id=registration.user_id,
            kind="certificate",
            title="Certificate in progress",
            message=f'Your certificate for "{event.title}" will be available within 5 business days',
            related_type="event",
            related_id=event.id,
        )
        participant = registration.user
        email = {
            "to_email": participant.email,
            "recipient_name": participant.name,
            "event_name": event.title,
            "certificate_number": certificate.certificate_number,
        }

    return WorkflowOutcome(
        result=_attendance_result(
            registration, certificate_id=certificate.id if certificate else None
        ),
        email=email,
    )


def bulk_check_in(
    db: Session,
    *,
    qr_codes: List[str],
    actor: Principal,
    now: Optional[datetime] = None,
) -> BulkCheckInResult:
    """Runs every attendance token through the single check-in rules."""
    now = now or utcnow()
    items: List[BulkCheckInItem] = []

    for qr_code in dict.fromkeys(qr_codes):
        registration = crud.registration.get_by_qr_code(db, qr_code=qr_code)
        if registration is None:
            items.append(
                BulkCheckInItem(
                    qr_code=qr_code,
                    success=False,
                    error="REGISTRATION_NOT_FOUND",
                    message="No registration matches this code",
                )
            )
            continue
        try:
            authorize(Action.MARK_ATTENDANCE, actor, [registration.event.organizer_id])
            outcome = _record_check_in(db, registration, now)
        except AppError as e:
            items.append(
                BulkCheckInItem(
                    qr_code=qr_code,
                    success=False,
                    registration_id=registration.id,
                    error=e.code,
                    message=e.message,
                )
            )
            continue
        items.append(
            BulkCheckInItem(
                qr_code=qr_code,
                success=True,
                registration_id=registration.id,
                checked_in_at=outcome.checked_in_at,
                already_recorded=outcome.already_recorded,
            )
        )

    summary = BulkCheckInSummary(
        total=len(items),
        checked_in=sum(1 for i in items if i.success and not i.already_recorded),
        already_checked_in=sum(1 for i in items if i.success and i.already_recorded),
        failed=sum(1 for i in items if not i.success),
    )
    return BulkCheckInResult(results=items, summary=summary)


def get_registration(
    db: Session,
    *,
    registration_id: str,
    actor: Principal,
    now: Optional[datetime] = None,
) -> RegistrationDetail:
    registration = crud.registration.get_detail(db, registration_id=registration_id)
    if registration is None:
        raise NotFoundError("Registration not found", code="REGISTRATION_NOT_FOUND")

    event: Event = registration.event
    authorize(
        Action.VIEW_REGISTRATION,
        actor,
        [registration.user_id, event.organizer_id],
        message="You do not have permission to view this registration",
    )

    return RegistrationDetail(
        **Registration.model_validate(registration).model_dump(),
        event=RegistrationEventSummary.model_validate(event),
        user=RegistrationParticipant.model_validate(registration.user),
        sessions=[
            EventSessionSchema.model_validate(sr.session)
            for sr in registration.session_registrations
        ],
        event_status=get_event_status(event.start_date, event.end_date, now),
        certificate_id=registration.certificate.id if registration.certificate else None,
    )


def list_user_registrations(
    db: Session,
    *,
    user_id: str,
    actor: Principal,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    now: Optional[datetime] = None,
) -> Page[UserRegistrationItem]:
    authorize(
        Action.VIEW_USER_REGISTRATIONS,
        actor,
        [user_id],
        message="You can only view your own registrations",
    )
    now = now or utcnow()

    items, total = crud.registration.get_multi_by_user(
        db, user_id=user_id, status=status, skip=(page - 1) * limit, limit=limit
    )
    return Page[UserRegistrationItem](
        data=[
            UserRegistrationItem(
                **Registration.model_validate(item).model_dump(),
                event=RegistrationEventSummary.model_validate(item.event),
                event_status=get_event_status(
                    item.event.start_date, item.event.end_date, now
                ),
            )
            for item in items
        ],
        pagination=Pagination.build(page, limit, total),
    )


def list_event_registrations(
    db: Session,
    *,
    event_id: str,
    actor: Principal,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
) -> Dict[str, Any]:
    event = crud.event.get(db, event_id)
    if event is None:
        raise NotFoundError("Event not found", code="EVENT_NOT_FOUND")
    authorize(
        Action.VIEW_EVENT_REGISTRATIONS,
        actor,
        [event.organizer_id],
        message="You do not have permission to view registrations for this event",
    )

    items, total = crud.registration.get_multi_by_event(
        db, event_id=event.id, status=status, skip=(page - 1) * limit, limit=limit
    )
    counts = crud.registration.count_by_status(db, event_id=event.id)
    statistics = RegistrationStats(
        total=sum(counts.values()),
        registered=counts.get("registered", 0),
        cancelled=counts.get("cancelled", 0),
        attended=counts.get("attended", 0),
        no_show=counts.get("no-show", 0),
    )

    return {
        "event": {
            "id": event.id,
            "title": event.title,
            "max_capacity": event.max_capacity,
            "current_registrations": event.current_registrations,
            "available_slots": available_slots(event.max_capacity, event.current_registrations),
        },
        "data": [
            EventRegistrationItem(
                **Registration.model_validate(item).model_dump(),
                user=RegistrationParticipant.model_validate(item.user),
            )
            for item in items
        ],
        "pagination": Pagination.build(page, limit, total),
        "statistics": statistics,
    }
