# app/api/v1/endpoints/events.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.api import deps
from app.core import email
from app.db.session import get_db
from app.schemas.common import Message, Page
from app.schemas.event import (
    Event,
    EventCreate,
    EventDetail,
    EventListItem,
    EventListStatus,
    EventUpdate,
)
from app.schemas.registration import RegistrationCreate, RegistrationResult, RegistrationStatus
from app.schemas.session import EventSession, EventSessionCreate
from app.schemas.token import Principal
from app.services import event_service, registration_service

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=Page[EventListItem])
def list_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[int] = Query(None, gt=0),
    search: Optional[str] = Query(None, min_length=1, max_length=100),
    featured: Optional[bool] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    status_filter: EventListStatus = Query(EventListStatus.active, alias="status"),
    db: Session = Depends(get_db),
):
    """
    Public event listing. `status=active` shows events that have not started,
    `past` those that have ended and `all` everything still published.
    """
    return event_service.list_events(
        db,
        page=page,
        limit=limit,
        category_id=category,
        search=search,
        featured=featured,
        start_from=start_date,
        start_to=end_date,
        status=status_filter.value,
    )


@router.get("/featured", response_model=List[EventListItem])
def featured_events(
    limit: int = Query(5, ge=1, le=5),
    db: Session = Depends(get_db),
):
    return event_service.get_featured_events(db, limit=limit)


@router.post("", response_model=Event, status_code=status.HTTP_201_CREATED)
def create_event(
    event_in: EventCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ORGANIZER/ADMIN]** Create an event owned by the caller."""
    return event_service.create_event(
        db,
        event_in=event_in,
        actor=current_user,
        request_meta=deps.get_request_meta(request),
    )


@router.get("/{event_id}", response_model=EventDetail)
def get_event(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: Optional[Principal] = Depends(deps.get_current_user_optional),
):
    return event_service.get_event(db, event_id=event_id, actor=current_user)


@router.put("/{event_id}", response_model=Event)
def update_event(
    event_id: str,
    event_in: EventUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return event_service.update_event(
        db,
        event_id=event_id,
        event_in=event_in,
        actor=current_user,
        request_meta=deps.get_request_meta(request),
    )


@router.delete("/{event_id}", response_model=Message)
def delete_event(
    event_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    event_service.delete_event(
        db,
        event_id=event_id,
        actor=current_user,
        request_meta=deps.get_request_meta(request),
    )
    return Message(message="Event deleted")


@router.get("/{event_id}/sessions", response_model=List[EventSession])
def list_sessions(event_id: str, db: Session = Depends(get_db)):
    return event_service.list_sessions(db, event_id=event_id)


@router.post(
    "/{event_id}/sessions",
    response_model=EventSession,
    status_code=status.HTTP_201_CREATED,
)
def add_session(
    event_id: str,
    session_in: EventSessionCreate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return event_service.add_session(
        db, event_id=event_id, session_in=session_in, actor=current_user
    )


@router.post(
    "/{event_id}/register",
    response_model=RegistrationResult,
    status_code=status.HTTP_201_CREATED,
)
def register_to_event(
    event_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    registration_in: Optional[RegistrationCreate] = None,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """
    Register the caller for an event and, optionally, some of its sessions.

    The confirmation email is sent in the background after the response.
    """
    registration_in = registration_in or RegistrationCreate()
    outcome = registration_service.register_to_event(
        db,
        event_id=event_id,
        actor=current_user,
        session_ids=registration_in.session_ids,
        notes=registration_in.notes,
        request_meta=deps.get_request_meta(request),
    )
    if outcome.email:
        background_tasks.add_task(email.send_registration_confirmation, **outcome.email)
    return outcome.result


@router.get("/{event_id}/registrations")
def list_event_registrations(
    event_id: str,
    status_filter: Optional[RegistrationStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ORGANIZER/ADMIN]** Participants of an event with per-status counts."""
    return registration_service.list_event_registrations(
        db,
        event_id=event_id,
        actor=current_user,
        status=status_filter.value if status_filter else None,
        page=page,
        limit=limit,
    )
