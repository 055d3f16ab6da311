# app/crud/crud_event.py
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import or_, update
from sqlalchemy.orm import Session, joinedload

from app.crud.base import CRUDBase
from app.models.event import Event
from app.schemas.event import EventCreate, EventUpdate


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):
    def get_active(self, db: Session, *, event_id: str) -> Optional[Event]:
        return (
            db.query(self.model)
            .filter(self.model.id == event_id, self.model.is_active.is_(True))
            .first()
        )

    def get_with_details(self, db: Session, *, event_id: str) -> Optional[Event]:
        return (
            db.query(self.model)
            .options(
                joinedload(self.model.category),
                joinedload(self.model.organizer),
                joinedload(self.model.sessions),
            )
            .filter(self.model.id == event_id, self.model.is_active.is_(True))
            .first()
        )

    def get_multi_public(
        self,
        db: Session,
        *,
        now: datetime,
        skip: int = 0,
        limit: int = 10,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        start_from: Optional[datetime] = None,
        start_to: Optional[datetime] = None,
        status: str = "active",
    ) -> Tuple[List[Event], int]:
        """
        Public listing. `status` is 'active' (not yet started), 'past'
        (already ended) or 'all'. Featured events come first, then by start date.
        """
        query = db.query(self.model).filter(self.model.is_active.is_(True))

        if status == "active":
            query = query.filter(self.model.start_date > now)
        elif status == "past":
            query = query.filter(self.model.end_date < now)

        if category_id:
            query = query.filter(self.model.category_id == category_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    self.model.title.ilike(pattern),
                    self.model.description.ilike(pattern),
                )
            )
        if featured is not None:
            query = query.filter(self.model.is_featured.is_(featured))
        if start_from:
            query = query.filter(self.model.start_date >= start_from)
        if start_to:
            query = query.filter(self.model.start_date <= start_to)

        total = query.count()
        events = (
            query.options(
                joinedload(self.model.category), joinedload(self.model.organizer)
            )
            .order_by(self.model.is_featured.desc(), self.model.start_date.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return events, total

    def get_featured(self, db: Session, *, now: datetime, limit: int = 5) -> List[Event]:
        return (
            db.query(self.model)
            .options(joinedload(self.model.category), joinedload(self.model.organizer))
            .filter(
                self.model.is_active.is_(True),
                self.model.is_featured.is_(True),
                self.model.start_date > now,
            )
            .order_by(self.model.start_date.asc())
            .limit(limit)
            .all()
        )

    def get_upcoming_by_organizer(
        self, db: Session, *, organizer_id: str, now: datetime, limit: int = 5
    ) -> List[Event]:
        return (
            db.query(self.model)
            .options(joinedload(self.model.category))
            .filter(
                self.model.organizer_id == organizer_id,
                self.model.is_active.is_(True),
                self.model.start_date >= now,
            )
            .order_by(self.model.start_date.asc())
            .limit(limit)
            .all()
        )

    def increment_registrations(self, db: Session, *, event_id: str) -> bool:
        """
        Takes one seat if one is free. The capacity check and the increment
        are a single statement, so two concurrent transactions can never both
        take the last seat. Returns False when the event is full.
        """
        result = db.execute(
            update(self.model)
            .where(
                self.model.id == event_id,
                self.model.current_registrations < self.model.max_capacity,
            )
            .values(current_registrations=self.model.current_registrations + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def decrement_registrations(self, db: Session, *, event_id: str) -> None:
        db.execute(
            update(self.model)
            .where(self.model.id == event_id, self.model.current_registrations > 0)
            .values(current_registrations=self.model.current_registrations - 1)
            .execution_options(synchronize_session=False)
        )


event = CRUDEvent(Event)
