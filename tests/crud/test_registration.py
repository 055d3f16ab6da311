# tests/crud/test_registration.py

from datetime import datetime
from unittest.mock import MagicMock

from app.crud.crud_registration import CRUDRegistration
from app.models.registration import EventRegistration
from app.utils.qr import validate_qr_code

registration_crud = CRUDRegistration(EventRegistration)


def test_create_with_sessions_builds_session_rows():
    """
    The registration is added with one session row per id and flushed,
    but not committed.
    """
    db_session = MagicMock()

    registration_crud.create_with_sessions(
        db=db_session,
        user_id="usr_1",
        event_id="evt_1",
        session_ids=["ses_a", "ses_b"],
        notes="Vegetarian lunch",
    )

    created_obj = db_session.add.call_args[0][0]
    assert created_obj.user_id == "usr_1"
    assert created_obj.event_id == "evt_1"
    assert created_obj.status == "registered"
    assert created_obj.notes == "Vegetarian lunch"
    assert validate_qr_code(created_obj.qr_code)
    assert [sr.session_id for sr in created_obj.session_registrations] == ["ses_a", "ses_b"]
    db_session.flush.assert_called_once()
    db_session.commit.assert_not_called()


def test_create_without_sessions():
    db_session = MagicMock()

    registration_crud.create_with_sessions(
        db=db_session, user_id="usr_1", event_id="evt_1", session_ids=[]
    )

    created_obj = db_session.add.call_args[0][0]
    assert created_obj.session_registrations == []


def test_count_by_status_returns_mapping():
    db_session = MagicMock()
    db_session.query.return_value.filter.return_value.group_by.return_value.all.return_value = [
        ("registered", 4),
        ("attended", 2),
    ]

    counts = registration_crud.count_by_status(db_session, event_id="evt_1")

    assert counts == {"registered": 4, "attended": 2}


def test_mark_checked_in_only_when_unset():
    db_session = MagicMock()
    db_session.execute.return_value.rowcount = 1

    assert registration_crud.mark_checked_in(
        db_session, registration_id="reg_1", now=datetime(2026, 3, 10, 9, 0)
    ) is True

    sql = str(db_session.execute.call_args[0][0])
    assert "event_registrations.checked_in_at IS NULL" in sql


def test_mark_checked_out_reports_earlier_write():
    """No matched row means another request already stored the check-out."""
    db_session = MagicMock()
    db_session.execute.return_value.rowcount = 0

    assert registration_crud.mark_checked_out(
        db_session, registration_id="reg_1", now=datetime(2026, 3, 10, 17, 0)
    ) is False
