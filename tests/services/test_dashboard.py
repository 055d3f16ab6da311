from datetime import timedelta

import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenError
from app.services import registration_service, stats_service
from app.utils.dates import utcnow
from tests.utils.auth import principal_for
from tests.utils.event import create_random_event
from tests.utils.user import create_organizer, create_random_user


def test_participants_cannot_see_organizer_dashboard(db: Session):
    actor = principal_for(create_random_user(db))
    with pytest.raises(ForbiddenError):
        stats_service.get_organizer_stats(db, actor=actor)
    with pytest.raises(ForbiddenError):
        stats_service.get_organizer_upcoming_events(db, actor=actor)


def test_organizer_stats_are_scoped_to_own_events(db: Session):
    organizer = create_organizer(db)
    rival = create_organizer(db)
    now = utcnow()
    upcoming = create_random_event(db, organizer.id, start_date=now + timedelta(days=3))
    create_random_event(
        db, organizer.id, start_date=now - timedelta(days=3), duration=timedelta(hours=2)
    )
    create_random_event(db, rival.id, start_date=now + timedelta(days=3))
    registration_service.register_to_event(
        db, event_id=upcoming.id, actor=principal_for(create_random_user(db))
    )

    stats = stats_service.get_organizer_stats(db, actor=principal_for(organizer), now=utcnow())

    assert stats.events.total == 2
    assert stats.events.upcoming == 1
    assert stats.events.completed == 1
    assert stats.events.active == 0
    assert stats.registrations.total == 1
    assert stats.registrations.today == 1
    assert stats.attendance.expected == 0
    assert stats.attendance.rate == 0
    assert stats.certificates.total == 0


def test_upcoming_events_widget(db: Session):
    organizer = create_organizer(db)
    now = utcnow()
    soon = create_random_event(
        db, organizer.id, start_date=now + timedelta(hours=1, minutes=30), max_capacity=10
    )
    later = create_random_event(db, organizer.id, start_date=now + timedelta(days=4))
    registration_service.register_to_event(
        db, event_id=soon.id, actor=principal_for(create_random_user(db)), now=now
    )

    items = stats_service.get_organizer_upcoming_events(
        db, actor=principal_for(organizer), now=now
    )

    assert [item.id for item in items] == [soon.id, later.id]
    assert items[0].hours_until == 2
    assert items[0].status == "very-soon"
    assert items[0].registrations == 1
    assert items[0].available_slots == 9
    assert items[1].status == "upcoming"


def test_recent_activity_lists_own_actions(db: Session):
    organizer = create_organizer(db)
    event = create_random_event(db, organizer.id)
    registration_service.register_to_event(db, event_id=event.id, actor=principal_for(organizer))

    items = stats_service.get_recent_activity(db, actor=principal_for(organizer))

    assert [item.activity_type for item in items] == ["event_registered"]
    assert items[0].metadata["event_title"] == event.title
