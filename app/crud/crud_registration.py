# app/crud/crud_registration.py
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, update
from sqlalchemy.orm import Session, joinedload, selectinload

from app.crud.base import CRUDBase
from app.models.registration import EventRegistration, SessionRegistration
from app.schemas.registration import RegistrationCreate
from app.utils.qr import generate_qr_code, registration_seed


class CRUDRegistration(CRUDBase[EventRegistration, RegistrationCreate, RegistrationCreate]):
    def get_by_user_and_event(
        self, db: Session, *, user_id: str, event_id: str
    ) -> Optional[EventRegistration]:
        return (
            db.query(self.model)
            .filter(self.model.user_id == user_id, self.model.event_id == event_id)
            .first()
        )

    def get_by_qr_code(self, db: Session, *, qr_code: str) -> Optional[EventRegistration]:
        return (
            db.query(self.model)
            .options(joinedload(self.model.event))
            .filter(self.model.qr_code == qr_code)
            .first()
        )

    def get_with_event(self, db: Session, *, registration_id: str) -> Optional[EventRegistration]:
        return (
            db.query(self.model)
            .options(joinedload(self.model.event), joinedload(self.model.user))
            .filter(self.model.id == registration_id)
            .first()
        )

    def get_detail(self, db: Session, *, registration_id: str) -> Optional[EventRegistration]:
        return (
            db.query(self.model)
            .options(
                joinedload(self.model.event),
                joinedload(self.model.user),
                joinedload(self.model.certificate),
                selectinload(self.model.session_registrations).joinedload(
                    SessionRegistration.session
                ),
            )
            .filter(self.model.id == registration_id)
            .first()
        )

    def get_active_for_owner(
        self, db: Session, *, registration_id: str, user_id: str
    ) -> Optional[EventRegistration]:
        """The caller's own registration, only while it is still `registered`."""
        return (
            db.query(self.model)
            .options(
                joinedload(self.model.event),
                selectinload(self.model.session_registrations),
            )
            .filter(
                self.model.id == registration_id,
                self.model.user_id == user_id,
                self.model.status == "registered",
            )
            .first()
        )

    def create_with_sessions(
        self,
        db: Session,
        *,
        user_id: str,
        event_id: str,
        session_ids: List[str],
        notes: Optional[str] = None,
    ) -> EventRegistration:
        """
        Adds the registration and its session rows to the current
        transaction. The caller commits.
        """
        db_obj = self.model(
            user_id=user_id,
            event_id=event_id,
            notes=notes,
            status="registered",
            qr_code=generate_qr_code(registration_seed(event_id, user_id)),
        )
        db_obj.session_registrations = [
            SessionRegistration(session_id=session_id) for session_id in session_ids
        ]
        db.add(db_obj)
        db.flush()
        return db_obj

    def get_multi_by_user(
        self,
        db: Session,
        *,
        user_id: str,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[EventRegistration], int]:
        query = db.query(self.model).filter(self.model.user_id == user_id)
        if status:
            query = query.filter(self.model.status == status)
        total = query.count()
        items = (
            query.options(joinedload(self.model.event))
            .order_by(self.model.registration_date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def get_multi_by_event(
        self,
        db: Session,
        *,
        event_id: str,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Tuple[List[EventRegistration], int]:
        query = db.query(self.model).filter(self.model.event_id == event_id)
        if status:
            query = query.filter(self.model.status == status)
        total = query.count()
        items = (
            query.options(joinedload(self.model.user))
            .order_by(self.model.registration_date.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def count_by_status(self, db: Session, *, event_id: str) -> Dict[str, int]:
        rows = (
            db.query(self.model.status, func.count(self.model.id))
            .filter(self.model.event_id == event_id)
            .group_by(self.model.status)
            .all()
        )
        return {status: count for status, count in rows}

    def count_registered_for_event(self, db: Session, *, event_id: str) -> int:
        return (
            db.query(func.count(self.model.id))
            .filter(self.model.event_id == event_id, self.model.status == "registered")
            .scalar()
        )

    def mark_checked_in(self, db: Session, *, registration_id: str, now: datetime) -> bool:
        """
        Records the check-in unless one is already stored. Returns False when
        another request recorded it first.
        """
        result = db.execute(
            update(self.model)
            .where(self.model.id == registration_id, self.model.checked_in_at.is_(None))
            .values(checked_in_at=now, status="attended")
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def mark_checked_out(self, db: Session, *, registration_id: str, now: datetime) -> bool:
        result = db.execute(
            update(self.model)
            .where(self.model.id == registration_id, self.model.checked_out_at.is_(None))
            .values(checked_out_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


registration =CRUDRegistration(EventRegistration)
