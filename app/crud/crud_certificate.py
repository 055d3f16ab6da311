# app/crud/crud_certificate.py
import secrets
import string
import time
from typing import List, Optional

from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.certificate import Certificate
from app.models.event import Event
from app.models.registration import EventRegistration
from app.schemas.certificate import Certificate as CertificateSchema

_VERIFICATION_ALPHABET = string.ascii_uppercase + string.digits


def generate_certificate_number(event_id: str, user_id: str) -> str:
    timestamp_ms = int(time.time() * 1000)
    return f"CERT-{event_id}-{user_id}-{timestamp_ms}"


def generate_verification_code() -> str:
    return "VER-" + "".join(secrets.choice(_VERIFICATION_ALPHABET) for _ in range(9))


class CRUDCertificate(CRUDBase[Certificate, CertificateSchema, CertificateSchema]):
    def get_by_registration(
        self, db: Session, *, registration_id: str
    ) -> Optional[Certificate]:
        return (
            db.query(self.model)
            .filter(self.model.event_registration_id == registration_id)
            .first()
        )

    def create_pending(
        self, db: Session, *, registration: EventRegistration, event: Event
    ) -> Certificate:
        """Adds a pending certificate to the current transaction; the caller commits."""
        db_obj = self.model(
            user_id=registration.user_id,
            event_id=event.id,
            event_registration_id=registration.id,
            certificate_number=generate_certificate_number(event.id, registration.user_id),
            verification_code=generate_verification_code(),
            title=f"Certificate of Participation - {event.title}",
            participation_type="participant",
            status="pending",
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def get_recent_issued_by_user(
        self, db: Session, *, user_id: str, limit: int = 5
    ) -> List[Certificate]:
        return (
            db.query(self.model)
            .filter(
                self.model.user_id == user_id,
                self.model.status.in_(("issued", "downloaded")),
            )
            .order_by(self.model.issued_date.desc())
            .limit(limit)
            .all()
        )


certificate = CRUDCertificate(Certificate)
