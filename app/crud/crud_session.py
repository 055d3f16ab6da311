# app/crud/crud_session.py
from typing import List

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.event_session import EventSession
from app.schemas.session import EventSessionCreate


class CRUDEventSession(CRUDBase[EventSession, EventSessionCreate, EventSessionCreate]):
    def get_multi_by_event(self, db: Session, *, event_id: str) -> List[EventSession]:
        return (
            db.query(self.model)
            .filter(self.model.event_id == event_id)
            .order_by(self.model.start_time.asc())
            .all()
        )

    def get_registrable(
        self, db: Session, *, event_id: str, session_ids: List[str]
    ) -> List[EventSession]:
        """Sessions of this event that are active and take registrations."""
        if not session_ids:
            return []
        return (
            db.query(self.model)
            .filter(
                self.model.id.in_(session_ids),
                self.model.event_id == event_id,
                self.model.is_active.is_(True),
                self.model.requires_registration.is_(True),
            )
            .all()
        )

    def increment_registrations(self, db: Session, *, session_id: str) -> bool:
        """Same single-statement seat grab as events; uncapped sessions always succeed."""
        result = db.execute(
            update(self.model)
            .where(
                self.model.id == session_id,
                (self.model.max_capacity.is_(None))
                | (self.model.current_registrations < self.model.max_capacity),
            )
            .values(current_registrations=self.model.current_registrations + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def decrement_registrations(self, db: Session, *, session_ids: List[str]) -> None:
        if not session_ids:
            return
        db.execute(
            update(self.model)
            .where(self.model.id.in_(session_ids), self.model.current_registrations > 0)
            .values(current_registrations=self.model.current_registrations - 1)
            .execution_options(synchronize_session=False)
        )


event_session = CRUDEventSession(EventSession)
