from app.utils.qr import (
    generate_qr_code,
    generate_qr_data,
    registration_seed,
    validate_qr_code,
)


def test_generated_code_has_expected_format():
    code = generate_qr_code(registration_seed("evt_1", "usr_1"))
    assert code.startswith("QR-")
    assert len(code) == 15
    assert validate_qr_code(code)


def test_codes_for_same_seed_are_unique():
    seed = registration_seed("evt_1", "usr_1")
    codes = {generate_qr_code(seed) for _ in range(50)}
    assert len(codes) == 50


def test_validate_rejects_malformed_codes():
    assert not validate_qr_code("")
    assert not validate_qr_code("QR-123")
    assert not validate_qr_code("qr-abcdefabcdef")
    assert not validate_qr_code("QR-ABCDEFABCDEG")


def test_qr_data_payload():
    data = generate_qr_data("reg_1", "evt_1", "usr_1")
    assert data["registrationId"] == "reg_1"
    assert data["eventId"] == "evt_1"
    assert data["userId"] == "usr_1"
    assert data["type"] == "event_registration"
    assert isinstance(data["timestamp"], int)
