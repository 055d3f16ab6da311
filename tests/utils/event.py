from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app import crud
from app.models.event import Event
from app.models.event_session import EventSession
from app.utils.dates import utcnow


def default_category_id(db: Session) -> int:
    return crud.category.get_all_ordered(db)[0].id


def create_random_event(
    db: Session,
    organizer_id: str,
    *,
    start_date: datetime | None = None,
    duration: timedelta = timedelta(hours=4),
    max_capacity: int = 50,
    requires_certificate: bool = False,
    is_featured: bool = False,
    title: str = "Test Event",
) -> Event:
    """
    Creates a dummy event for testing purposes. Written straight to the
    table so tests can place events in the past or in progress.
    """
    start_date = start_date or utcnow() + timedelta(days=10)
    event = Event(
        organizer_id=organizer_id,
        category_id=default_category_id(db),
        title=title,
        description="An event created for automated tests",
        start_date=start_date,
        end_date=start_date + duration,
        location="Main Auditorium",
        max_capacity=max_capacity,
        requires_certificate=requires_certificate,
        is_featured=is_featured,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def create_session(
    db: Session,
    event: Event,
    *,
    max_capacity: int | None = None,
    requires_registration: bool = True,
    is_active: bool = True,
    title: str = "Opening Keynote",
) -> EventSession:
    session = EventSession(
        event_id=event.id,
        title=title,
        start_time=event.start_date,
        end_time=event.start_date + timedelta(hours=1),
        max_capacity=max_capacity,
        requires_registration=requires_registration,
        is_active=is_active,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session
