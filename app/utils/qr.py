# app/utils/qr.py
"""
Attendance tokens printed on a participant's ticket and scanned at the door.

Format: ``QR-`` followed by 12 uppercase hex characters taken from a SHA-256
digest, so the token carries no personal data.
"""

import hashlib
import re
import secrets
import time

QR_CODE_PATTERN = re.compile(r"^QR-[A-F0-9]{12}$")


def registration_seed(event_id: str, user_id: str) -> str:
    return f"event-{event_id}-user-{user_id}"


def generate_qr_code(seed: str) -> str:
    timestamp_ms = int(time.time() * 1000)
    material = f"{seed}-{timestamp_ms}-{secrets.token_hex(4)}"
    digest = hashlib.sha256(material.encode("utf-8")).hexdigest()
    return f"QR-{digest[:12].upper()}"


def validate_qr_code(code: str) -> bool:
    return bool(code) and QR_CODE_PATTERN.match(code) is not None


def generate_qr_data(registration_id: str, event_id: str, user_id: str) -> dict:
    """Payload the client renders as a QR image."""
    return {
        "registrationId": registration_id,
        "eventId": event_id,
        "userId": user_id,
        "timestamp": int(time.time() * 1000),
        "type": "event_registration",
    }
