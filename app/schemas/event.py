# app/schemas/event.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.category import Category
from app.schemas.session import EventSession


class EventListStatus(str, Enum):
    active = "active"
    all = "all"
    past = "past"


class EventBase(BaseModel):
    title: str = Field(..., min_length=3, max_length=200, json_schema_extra={"example": "Data Science Week"})
    description: str = Field(..., min_length=10, max_length=5000)
    short_description: Optional[str] = Field(None, max_length=300)
    image_url: Optional[str] = None
    start_date: datetime
    end_date: datetime
    location: str = Field(..., min_length=3, max_length=200, json_schema_extra={"example": "Main Auditorium"})
    address: Optional[str] = Field(None, max_length=300)
    category_id: int = Field(..., gt=0)
    max_capacity: int = Field(..., ge=1, le=10000)
    requires_certificate: bool = False
    is_featured: bool = False
    requirements: Optional[List[str]] = Field(None, max_length=10)
    tags: Optional[List[str]] = Field(None, max_length=20)


class EventCreate(EventBase):
    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, min_length=10, max_length=5000)
    short_description: Optional[str] = Field(None, max_length=300)
    image_url: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=3, max_length=200)
    address: Optional[str] = Field(None, max_length=300)
    category_id: Optional[int] = Field(None, gt=0)
    max_capacity: Optional[int] = Field(None, ge=1, le=10000)
    requires_certificate: Optional[bool] = None
    is_featured: Optional[bool] = None
    requirements: Optional[List[str]] = Field(None, max_length=10)
    tags: Optional[List[str]] = Field(None, max_length=20)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class OrganizerSummary(BaseModel):
    id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class Event(BaseModel):
    id: str
    organizer_id: str
    category_id: int
    title: str
    description: str
    short_description: Optional[str] = None
    image_url: Optional[str] = None
    start_date: datetime
    end_date: datetime
    location: str
    address: Optional[str] = None
    max_capacity: int
    current_registrations: int
    requires_certificate: bool
    is_featured: bool
    is_active: bool
    tags: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class EventListItem(Event):
    category: Optional[Category] = None
    organizer: Optional[OrganizerSummary] = None
    available_slots: int
    registration_status: str


class OwnRegistration(BaseModel):
    id: str
    status: str
    qr_code: str
    registration_date: datetime

    model_config = {"from_attributes": True}


class EventDetail(EventListItem):
    sessions: List[EventSession] = []
    event_status: str
    user_registration: Optional[OwnRegistration] = None
