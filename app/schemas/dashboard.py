# app/schemas/dashboard.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.category import Category


class EventStats(BaseModel):
    total: int
    active: int
    upcoming: int
    completed: int
    trend: int


class RegistrationCounts(BaseModel):
    total: int
    today: int
    trend: int


class AttendanceStats(BaseModel):
    today: int
    rate: int
    expected: int


class CertificateStats(BaseModel):
    total: int
    today: int


class OrganizerStats(BaseModel):
    events: EventStats
    registrations: RegistrationCounts
    attendance: AttendanceStats
    certificates: CertificateStats


class UpcomingEvent(BaseModel):
    id: str
    title: str
    start_date: datetime
    location: str
    category: Optional[Category] = None
    registrations: int
    max_capacity: int
    available_slots: int
    hours_until: int
    # upcoming | soon (<= 24h) | very-soon (<= 2h)
    status: str
