# tests/crud/test_event.py

from unittest.mock import MagicMock

from app.crud.crud_event import CRUDEvent
from app.crud.crud_session import CRUDEventSession
from app.models.event import Event
from app.models.event_session import EventSession

event_crud = CRUDEvent(Event)
session_crud = CRUDEventSession(EventSession)


def test_increment_registrations_reports_taken_seat():
    db_session = MagicMock()
    db_session.execute.return_value.rowcount = 1

    assert event_crud.increment_registrations(db_session, event_id="evt_1") is True
    db_session.execute.assert_called_once()


def test_increment_registrations_reports_full_event():
    """A conditional UPDATE that matches no row means the event is full."""
    db_session = MagicMock()
    db_session.execute.return_value.rowcount = 0

    assert event_crud.increment_registrations(db_session, event_id="evt_1") is False


def test_increment_registrations_statement_checks_capacity():
    db_session = MagicMock()
    db_session.execute.return_value.rowcount = 1

    event_crud.increment_registrations(db_session, event_id="evt_1")

    statement = db_session.execute.call_args[0][0]
    sql = str(statement)
    assert "current_registrations < events.max_capacity" in sql


def test_session_decrement_skips_empty_list():
    db_session = MagicMock()

    session_crud.decrement_registrations(db_session, session_ids=[])

    db_session.execute.assert_not_called()


def test_get_registrable_short_circuits_without_ids():
    db_session = MagicMock()

    assert session_crud.get_registrable(db_session, event_id="evt_1", session_ids=[]) == []
    db_session.query.assert_not_called()
