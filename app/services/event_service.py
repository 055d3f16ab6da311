# app/services/event_service.py
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import crud
from app.core.exceptions import InternalError, InvalidError, NotFoundError
from app.core.permissions import Action, authorize
from app.models.event import Event
from app.models.event_session import EventSession
from app.schemas.common import Page, Pagination
from app.schemas.event import (
    EventCreate,
    EventDetail,
    EventListItem,
    EventUpdate,
    OwnRegistration,
)
from app.schemas.session import EventSessionCreate
from app.schemas.token import Principal
from app.services import activity_service
from app.utils.dates import as_naive_utc, get_event_status, utcnow

logger = logging.getLogger(__name__)


def available_slots(max_capacity: int, current_registrations: int) -> int:
    return max(max_capacity - current_registrations, 0)


def registration_status(max_capacity: int, current_registrations: int) -> str:
    return "full" if current_registrations >= max_capacity else "available"


def _list_item(event: Event) -> EventListItem:
    return EventListItem.model_validate(
        {
            **{c.name: getattr(event, c.name) for c in Event.__table__.columns},
            "category": event.category,
            "organizer": event.organizer,
            "available_slots": available_slots(
                event.max_capacity, event.current_registrations
            ),
            "registration_status": registration_status(
                event.max_capacity, event.current_registrations
            ),
        }
    )


def list_events(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    category_id: Optional[int] = None,
    search: Optional[str] = None,
    featured: Optional[bool] = None,
    start_from: Optional[datetime] = None,
    start_to: Optional[datetime] = None,
    status: str = "active",
    now: Optional[datetime] = None,
) -> Page[EventListItem]:
    now = now or utcnow()
    events, total = crud.event.get_multi_public(
        db,
        now=now,
        skip=(page - 1) * limit,
        limit=limit,
        category_id=category_id,
        search=search,
        featured=featured,
        start_from=as_naive_utc(start_from) if start_from else None,
        start_to=as_naive_utc(start_to) if start_to else None,
        status=status,
    )
    return Page[EventListItem](
        data=[_list_item(e) for e in events],
        pagination=Pagination.build(page, limit, total),
    )


def get_featured_events(
    db: Session, *, limit: int = 5, now: Optional[datetime] = None
) -> List[EventListItem]:
    now = now or utcnow()
    return [_list_item(e) for e in crud.event.get_featured(db, now=now, limit=limit)]


def get_event(
    db: Session,
    *,
    event_id: str,
    actor: Optional[Principal] = None,
    now: Optional[datetime] = None,
) -> EventDetail:
    """Public event page; embeds the caller's own registration when signed in."""
    event = crud.event.get_with_details(db, event_id=event_id)
    if event is None:
        raise NotFoundError("Event not found", code="EVENT_NOT_FOUND")

    own = None
    if actor is not None:
        registration = crud.registration.get_by_user_and_event(
            db, user_id=actor.user_id, event_id=event.id
        )
        if registration is not None:
            own = OwnRegistration.model_validate(registration)

    item = _list_item(event)
    return EventDetail(
        **item.model_dump(),
        sessions=[s for s in event.sessions if s.is_active],
        event_status=get_event_status(event.start_date, event.end_date, now),
        user_registration=own,
    )


def _require_category(db: Session, category_id: int) -> None:
    if crud.category.get(db, category_id) is None:
        raise InvalidError(
            "Category does not exist",
            code="INVALID_CATEGORY",
            details={"category_id": category_id},
        )


def _get_owned_event(
    db: Session, event_id: str, actor: Principal, message: str
) -> Event:
    event = crud.event.get_active(db, event_id=event_id)
    if event is None:
        raise NotFoundError("Event not found", code="EVENT_NOT_FOUND")
    authorize(Action.MANAGE_EVENT, actor, [event.organizer_id], message=message)
    return event


def create_event(
    db: Session,
    *,
    event_in: EventCreate,
    actor: Principal,
    now: Optional[datetime] = None,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
) -> Event:
    authorize(
        Action.CREATE_EVENT,
        actor,
        message="Only organizers and administrators can create events",
    )
    now = now or utcnow()

    values = event_in.model_dump()
    values["start_date"] = as_naive_utc(values["start_date"])
    values["end_date"] = as_naive_utc(values["end_date"])
    if values["start_date"] < now:
        raise InvalidError("The start date cannot be in the past", code="INVALID_DATES")
    _require_category(db, event_in.category_id)

    try:
        event = Event(**values, organizer_id=actor.user_id)
        db.add(event)
        db.flush()
        activity_service.log_activity(
            db,
            user_id=actor.user_id,
            activity_type="event_created",
            description=f'Created event "{event.title}"',
            related_type="event",
            related_id=event.id,
            metadata={"event_title": event.title, "max_capacity": event.max_capacity},
            request_meta=request_meta,
        )
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to create event for organizer {actor.user_id}",
            exc_info=True,
            extra={"organizer_id": actor.user_id},
        )
        db.rollback()
        raise InternalError("Could not create the event")

    db.refresh(event)
    logger.info(f"Event {event.id} created by {actor.user_id}")
    return event


def update_event(
    db: Session,
    *,
    event_id: str,
    event_in: EventUpdate,
    actor: Principal,
    now: Optional[datetime] = None,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
) -> Event:
    event = _get_owned_event(
        db, event_id, actor, "You do not have permission to update this event"
    )
    now = now or utcnow()
    update_data = event_in.model_dump(exclude_unset=True)

    for field in ("start_date", "end_date"):
        if update_data.get(field) is not None:
            update_data[field] = as_naive_utc(update_data[field])
    start = update_data.get("start_date") or event.start_date
    end = update_data.get("end_date") or event.end_date
    if end <= start:
        raise InvalidError("End date must be after start date", code="INVALID_DATES")
    if "start_date" in update_data and update_data["start_date"] < now:
        raise InvalidError("The start date cannot be in the past", code="INVALID_DATES")

    new_capacity = update_data.get("max_capacity")
    if new_capacity is not None and new_capacity < event.current_registrations:
        raise InvalidError(
            f"Capacity cannot be reduced below {event.current_registrations} "
            "(current registrations)",
            code="CAPACITY_BELOW_REGISTRATIONS",
            details={"current_registrations": event.current_registrations},
        )
    if update_data.get("category_id") is not None:
        _require_category(db, update_data["category_id"])

    try:
        for field, value in update_data.items():
            setattr(event, field, value)
        activity_service.log_activity(
            db,
            user_id=actor.user_id,
            activity_type="event_updated",
            description=f'Updated event "{event.title}"',
            related_type="event",
            related_id=event.id,
            metadata={"fields": sorted(update_data)},
            request_meta=request_meta,
        )
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to update event {event_id}",
            exc_info=True,
            extra={"event_id": event_id},
        )
        db.rollback()
        raise InternalError("Could not update the event")

    db.refresh(event)
    return event


def delete_event(
    db: Session,
    *,
    event_id: str,
    actor: Principal,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
) -> Event:
    """Soft delete: the row stays for history but leaves every listing."""
    event = _get_owned_event(
        db, event_id, actor, "You do not have permission to delete this event"
    )
    registered = crud.registration.count_registered_for_event(db, event_id=event.id)
    if registered > 0:
        raise InvalidError(
            "An event with registered participants cannot be deleted",
            code="HAS_REGISTRATIONS",
            details={"registered": registered},
        )

    try:
        event.is_active = False
        activity_service.log_activity(
            db,
            user_id=actor.user_id,
            activity_type="event_deleted",
            description=f'Deleted event "{event.title}"',
            related_type="event",
            related_id=event.id,
            request_meta=request_meta,
        )
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to delete event {event_id}",
            exc_info=True,
            extra={"event_id": event_id},
        )
        db.rollback()
        raise InternalError("Could not delete the event")

    logger.info(f"Event {event_id} deactivated by {actor.user_id}")
    return event


def add_session(
    db: Session, *, event_id: str, session_in: EventSessionCreate, actor: Principal
) -> EventSession:
    event = _get_owned_event(
        db, event_id, actor, "You do not have permission to manage this event's sessions"
    )
    values = session_in.model_dump()
    values["start_time"] = as_naive_utc(values["start_time"])
    values["end_time"] = as_naive_utc(values["end_time"])
    if values["start_time"] < event.start_date or values["end_time"] > event.end_date:
        raise InvalidError(
            "Sessions must take place within the event's dates", code="INVALID_SESSION_TIME"
        )

    try:
        session = EventSession(**values, event_id=event.id)
        db.add(session)
        db.commit()
    except SQLAlchemyError:
        logger.error(
            f"Failed to add session to event {event_id}",
            exc_info=True,
            extra={"event_id": event_id},
        )
        db.rollback()
        raise InternalError("Could not create the session")

    db.refresh(session)
    return session


def list_sessions(db: Session, *, event_id: str) -> List[EventSession]:
    event = crud.event.get_active(db, event_id=event_id)
    if event is None:
        raise NotFoundError("Event not found", code="EVENT_NOT_FOUND")
    return crud.event_session.get_multi_by_event(db, event_id=event.id)
