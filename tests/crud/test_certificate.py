# tests/crud/test_certificate.py

import re
from unittest.mock import MagicMock

from app.crud.crud_certificate import (
    CRUDCertificate,
    generate_certificate_number,
    generate_verification_code,
)
from app.models.certificate import Certificate
from app.models.event import Event
from app.models.registration import EventRegistration

certificate_crud = CRUDCertificate(Certificate)


def test_certificate_number_format():
    number = generate_certificate_number("evt_1", "usr_1")
    assert re.match(r"^CERT-evt_1-usr_1-\d{13}$", number)


def test_verification_code_format():
    code = generate_verification_code()
    assert re.match(r"^VER-[A-Z0-9]{9}$", code)


def test_create_pending():
    db_session = MagicMock()
    registration = EventRegistration(id="reg_1", user_id="usr_1", event_id="evt_1")
    event = Event(id="evt_1", title="Data Science Week")

    certificate_crud.create_pending(db_session, registration=registration, event=event)

    created_obj = db_session.add.call_args[0][0]
    assert created_obj.event_registration_id == "reg_1"
    assert created_obj.user_id == "usr_1"
    assert created_obj.status == "pending"
    assert created_obj.participation_type == "participant"
    assert created_obj.title == "Certificate of Participation - Data Science Week"
    db_session.flush.assert_called_once()
    db_session.commit.assert_not_called()
