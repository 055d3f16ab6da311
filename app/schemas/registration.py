# app/schemas/registration.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.config import settings
from app.schemas.session import EventSession


class RegistrationStatus(str, Enum):
    registered = "registered"
    cancelled = "cancelled"
    attended = "attended"
    no_show = "no-show"


class RegistrationCreate(BaseModel):
    session_ids: List[str] = Field(
        default_factory=list, max_length=settings.MAX_SESSIONS_PER_REGISTRATION
    )
    notes: Optional[str] = Field(None, max_length=500)


class RegistrationCancel(BaseModel):
    reason: Optional[str] = Field(None, min_length=5, max_length=500)


class BulkCheckIn(BaseModel):
    qr_codes: List[str] = Field(..., min_length=1, max_length=500)


class Registration(BaseModel):
    id: str
    user_id: str
    event_id: str
    status: RegistrationStatus
    registration_date: datetime
    qr_code: str
    notes: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    checked_in_at: Optional[datetime] = None
    checked_out_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RegistrationEventSummary(BaseModel):
    id: str
    title: str
    start_date: datetime
    end_date: datetime
    location: str
    requires_certificate: bool

    model_config = {"from_attributes": True}


class RegistrationParticipant(BaseModel):
    id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class RegistrationResult(BaseModel):
    """Returned by a successful registration."""

    registration: Registration
    event: RegistrationEventSummary
    sessions: List[EventSession] = []
    available_slots: int
    qr_data: dict


class RegistrationDetail(Registration):
    event: RegistrationEventSummary
    user: RegistrationParticipant
    sessions: List[EventSession] = []
    event_status: str
    certificate_id: Optional[str] = None


class UserRegistrationItem(Registration):
    event: RegistrationEventSummary
    event_status: str


class EventRegistrationItem(Registration):
    user: RegistrationParticipant


class RegistrationStats(BaseModel):
    total: int = 0
    registered: int = 0
    cancelled: int = 0
    attended: int = 0
    no_show: int = 0


class AttendanceResult(BaseModel):
    """Check-in / check-out outcome.

    `already_recorded` is true when the timestamp was set by an earlier call;
    the stored value is returned unchanged.
    """

    registration_id: str
    status: RegistrationStatus
    checked_in_at: Optional[datetime] = None
    checked_out_at: Optional[datetime] = None
    already_recorded: bool = False
    certificate_id: Optional[str] = None


class BulkCheckInItem(BaseModel):
    qr_code: str
    success: bool
    registration_id: Optional[str] = None
    checked_in_at: Optional[datetime] = None
    already_recorded: bool = False
    error: Optional[str] = None
    message: Optional[str] = None


class BulkCheckInSummary(BaseModel):
    total: int
    checked_in: int
    already_checked_in: int
    failed: int


class BulkCheckInResult(BaseModel):
    results: List[BulkCheckInItem]
    summary: BulkCheckInSummary
