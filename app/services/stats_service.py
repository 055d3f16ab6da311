# app/services/stats_service.py
"""
Organizer dashboard figures.

Everything is scoped to events organized by the caller. "Today" and the
month windows are computed in UTC.
"""

import math
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app import crud
from app.core.permissions import Action, authorize
from app.models.certificate import Certificate
from app.models.event import Event
from app.models.registration import EventRegistration
from app.schemas.activity import UserActivity as UserActivitySchema
from app.schemas.category import Category as CategorySchema
from app.schemas.dashboard import (
    AttendanceStats,
    CertificateStats,
    EventStats,
    OrganizerStats,
    RegistrationCounts,
    UpcomingEvent,
)
from app.schemas.token import Principal
from app.utils.dates import day_bounds, month_start, utcnow

ACTIVE_REGISTRATION_STATUSES = ("registered", "attended")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_trend(current: int, previous: int) -> int:
    """Percentage change from `previous` to `current`, as a whole number."""
    if previous == 0:
        return 100 if current > 0 else 0
    return _round_half_up((current - previous) / previous * 100)


def attendance_rate(checked_in: int, expected: int) -> int:
    if expected == 0:
        return 0
    return _round_half_up(checked_in / expected * 100)


def _count(query) -> int:
    return query.scalar() or 0


def get_organizer_stats(
    db: Session, *, actor: Principal, now: Optional[datetime] = None
) -> OrganizerStats:
    authorize(
        Action.VIEW_ORGANIZER_DASHBOARD,
        actor,
        message="You do not have permission to view these statistics",
    )
    now = now or utcnow()
    organizer_id = actor.user_id
    today_start, today_end = day_bounds(now)
    this_month = month_start(now)
    last_month = month_start(now, offset=-1)

    def events(*criteria):
        return _count(
            db.query(func.count(Event.id)).filter(Event.organizer_id == organizer_id, *criteria)
        )

    def registrations(*criteria):
        return _count(
            db.query(func.count(EventRegistration.id))
            .join(Event, EventRegistration.event_id == Event.id)
            .filter(Event.organizer_id == organizer_id, *criteria)
        )

    def certificates(*criteria):
        return _count(
            db.query(func.count(Certificate.id))
            .join(Event, Certificate.event_id == Event.id)
            .filter(Event.organizer_id == organizer_id, *criteria)
        )

    active_flag = Event.is_active.is_(True)
    counted_status = EventRegistration.status.in_(ACTIVE_REGISTRATION_STATUSES)

    checked_in_today = registrations(
        EventRegistration.checked_in_at >= today_start,
        EventRegistration.checked_in_at < today_end,
    )
    expected_today = registrations(
        Event.start_date <= today_end,
        Event.end_date >= today_start,
        counted_status,
    )

    return OrganizerStats(
        events=EventStats(
            total=events(active_flag),
            active=events(active_flag, Event.start_date <= now, Event.end_date >= now),
            upcoming=events(active_flag, Event.start_date > now),
            completed=events(active_flag, Event.end_date < now),
            trend=calculate_trend(
                events(Event.created_at >= this_month, Event.created_at < now),
                events(Event.created_at >= last_month, Event.created_at < this_month),
            ),
        ),
        registrations=RegistrationCounts(
            total=registrations(counted_status),
            today=registrations(
                EventRegistration.registration_date >= today_start,
                EventRegistration.registration_date < today_end,
                counted_status,
            ),
            trend=calculate_trend(
                registrations(
                    EventRegistration.registration_date >= this_month,
                    EventRegistration.registration_date < now,
                ),
                registrations(
                    EventRegistration.registration_date >= last_month,
                    EventRegistration.registration_date < this_month,
                ),
            ),
        ),
        attendance=AttendanceStats(
            today=checked_in_today,
            rate=attendance_rate(checked_in_today, expected_today),
            expected=expected_today,
        ),
        certificates=CertificateStats(
            total=certificates(Certificate.status.in_(("issued", "downloaded"))),
            today=certificates(
                Certificate.issued_date >= today_start,
                Certificate.issued_date < today_end,
            ),
        ),
    )


def upcoming_status(hours: int) -> str:
    if hours <= 2:
        return "very-soon"
    if hours <= 24:
        return "soon"
    return "upcoming"


def get_organizer_upcoming_events(
    db: Session, *, actor: Principal, limit: int = 5, now: Optional[datetime] = None
) -> List[UpcomingEvent]:
    authorize(
        Action.VIEW_ORGANIZER_DASHBOARD,
        actor,
        message="You do not have permission to view this information",
    )
    now = now or utcnow()
    events = crud.event.get_upcoming_by_organizer(
        db, organizer_id=actor.user_id, now=now, limit=limit
    )

    result = []
    for event in events:
        registered = crud.registration.count_registered_for_event(db, event_id=event.id)
        hours = math.ceil((event.start_date - now).total_seconds() / 3600)
        result.append(
            UpcomingEvent(
                id=event.id,
                title=event.title,
                start_date=event.start_date,
                location=event.location,
                category=CategorySchema.model_validate(event.category) if event.category else None,
                registrations=registered,
                max_capacity=event.max_capacity,
                available_slots=event.max_capacity - registered,
                hours_until=hours,
                status=upcoming_status(hours),
            )
        )
    return result


def get_recent_activity(
    db: Session, *, actor: Principal, limit: int = 10
) -> List[UserActivitySchema]:
    authorize(
        Action.VIEW_ORGANIZER_DASHBOARD,
        actor,
        message="You do not have permission to view this information",
    )
    items, _ = crud.user_activity.get_multi_by_user(db, user_id=actor.user_id, limit=limit)
    return [UserActivitySchema.model_validate(item) for item in items]
