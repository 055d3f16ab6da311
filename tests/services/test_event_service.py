from datetime import timedelta

import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenError, InvalidError, NotFoundError
from app.schemas.event import EventCreate, EventUpdate
from app.schemas.session import EventSessionCreate
from app.services import event_service, registration_service
from app.utils.dates import utcnow
from tests.utils.auth import principal_for
from tests.utils.event import create_random_event, default_category_id
from tests.utils.user import create_admin, create_organizer, create_random_user


def _event_in(db: Session, **overrides) -> EventCreate:
    start = utcnow() + timedelta(days=7)
    values = dict(
        title="Machine Learning Seminar",
        description="A seminar on applied machine learning",
        start_date=start,
        end_date=start + timedelta(hours=3),
        location="Room 101",
        category_id=default_category_id(db),
        max_capacity=30,
    )
    values.update(overrides)
    return EventCreate(**values)


def test_available_slots_never_negative():
    assert event_service.available_slots(10, 3) == 7
    assert event_service.available_slots(10, 12) == 0
    assert event_service.registration_status(10, 10) == "full"
    assert event_service.registration_status(10, 9) == "available"


def test_organizer_creates_event(db: Session):
    organizer = create_organizer(db)

    event = event_service.create_event(
        db, event_in=_event_in(db), actor=principal_for(organizer)
    )

    assert event.organizer_id == organizer.id
    assert event.current_registrations == 0
    assert event.is_active is True


def test_participant_cannot_create_event(db: Session):
    with pytest.raises(ForbiddenError):
        event_service.create_event(
            db, event_in=_event_in(db), actor=principal_for(create_random_user(db))
        )


def test_admin_can_create_event(db: Session):
    admin = create_admin(db)
    event = event_service.create_event(db, event_in=_event_in(db), actor=principal_for(admin))
    assert event.organizer_id == admin.id


def test_event_in_the_past_is_rejected(db: Session):
    start = utcnow() - timedelta(days=1)
    event_in = _event_in(db, start_date=start, end_date=start + timedelta(hours=2))

    with pytest.raises(InvalidError) as exc_info:
        event_service.create_event(
            db, event_in=event_in, actor=principal_for(create_organizer(db))
        )

    assert exc_info.value.code == "INVALID_DATES"


def test_unknown_category_is_rejected(db: Session):
    with pytest.raises(InvalidError) as exc_info:
        event_service.create_event(
            db,
            event_in=_event_in(db, category_id=9999),
            actor=principal_for(create_organizer(db)),
        )
    assert exc_info.value.code == "INVALID_CATEGORY"


def test_capacity_cannot_drop_below_registrations(db: Session):
    organizer = create_organizer(db)
    event = create_random_event(db, organizer.id, max_capacity=5)
    for _ in range(3):
        registration_service.register_to_event(
            db, event_id=event.id, actor=principal_for(create_random_user(db))
        )

    with pytest.raises(InvalidError) as exc_info:
        event_service.update_event(
            db,
            event_id=event.id,
            event_in=EventUpdate(max_capacity=2),
            actor=principal_for(organizer),
        )
    assert exc_info.value.code == "CAPACITY_BELOW_REGISTRATIONS"

    updated = event_service.update_event(
        db,
        event_id=event.id,
        event_in=EventUpdate(max_capacity=3),
        actor=principal_for(organizer),
    )
    assert updated.max_capacity == 3


def test_only_owner_updates_event(db: Session):
    event = create_random_event(db, create_organizer(db).id)

    with pytest.raises(ForbiddenError):
        event_service.update_event(
            db,
            event_id=event.id,
            event_in=EventUpdate(title="Hijacked"),
            actor=principal_for(create_organizer(db)),
        )


def test_delete_with_registrations_is_rejected(db: Session):
    organizer = create_organizer(db)
    event = create_random_event(db, organizer.id)
    registration_service.register_to_event(
        db, event_id=event.id, actor=principal_for(create_random_user(db))
    )

    with pytest.raises(InvalidError) as exc_info:
        event_service.delete_event(db, event_id=event.id, actor=principal_for(organizer))

    assert exc_info.value.code == "HAS_REGISTRATIONS"


def test_delete_hides_event(db: Session):
    organizer = create_organizer(db)
    event = create_random_event(db, organizer.id)

    event_service.delete_event(db, event_id=event.id, actor=principal_for(organizer))

    with pytest.raises(NotFoundError):
        event_service.get_event(db, event_id=event.id)
    listing = event_service.list_events(db, status="all")
    assert event.id not in {item.id for item in listing.data}


def test_listing_filters_and_orders(db: Session):
    organizer = create_organizer(db)
    now = utcnow()
    later = create_random_event(db, organizer.id, start_date=now + timedelta(days=20), title="Later")
    sooner = create_random_event(db, organizer.id, start_date=now + timedelta(days=5), title="Sooner")
    featured = create_random_event(
        db, organizer.id, start_date=now + timedelta(days=30), is_featured=True, title="Star"
    )
    past = create_random_event(db, organizer.id, start_date=now - timedelta(days=3), title="Old")

    active = event_service.list_events(db, limit=100, now=now)
    ids = [item.id for item in active.data]
    assert past.id not in ids
    # Featured first, then by start date
    assert ids.index(featured.id) < ids.index(sooner.id) < ids.index(later.id)

    past_listing = event_service.list_events(db, status="past", limit=100, now=now)
    assert past.id in {item.id for item in past_listing.data}

    searched = event_service.list_events(db, search="sooner", limit=100, now=now)
    assert [item.id for item in searched.data] == [sooner.id]


def test_event_detail_embeds_own_registration(db: Session):
    organizer = create_organizer(db)
    participant = create_random_user(db)
    event = create_random_event(db, organizer.id)
    registration_service.register_to_event(db, event_id=event.id, actor=principal_for(participant))

    anonymous = event_service.get_event(db, event_id=event.id)
    signed_in = event_service.get_event(db, event_id=event.id, actor=principal_for(participant))

    assert anonymous.user_registration is None
    assert signed_in.user_registration.status == "registered"
    assert signed_in.available_slots == event.max_capacity - 1
    assert signed_in.event_status == "upcoming"


def test_session_must_fit_event_window(db: Session):
    organizer = create_organizer(db)
    event = create_random_event(db, organizer.id)

    with pytest.raises(InvalidError) as exc_info:
        event_service.add_session(
            db,
            event_id=event.id,
            session_in=EventSessionCreate(
                title="Too early",
                start_time=event.start_date - timedelta(hours=1),
                end_time=event.start_date + timedelta(hours=1),
            ),
            actor=principal_for(organizer),
        )
    assert exc_info.value.code == "INVALID_SESSION_TIME"

    session = event_service.add_session(
        db,
        event_id=event.id,
        session_in=EventSessionCreate(
            title="Opening",
            start_time=event.start_date,
            end_time=event.start_date + timedelta(hours=1),
            max_capacity=20,
        ),
        actor=principal_for(organizer),
    )
    assert [s.id for s in event_service.list_sessions(db, event_id=event.id)] == [session.id]
