# app/schemas/session.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class EventSessionCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    speaker: Optional[str] = Field(None, max_length=200)
    start_time: datetime
    end_time: datetime
    max_capacity: Optional[int] = Field(None, ge=1)
    requires_registration: bool = True
    is_active: bool = True

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("Session end time must be after its start time")
        return self


class EventSession(BaseModel):
    id: str
    event_id: str
    title: str
    description: Optional[str] = None
    speaker: Optional[str] = None
    start_time: datetime
    end_time: datetime
    max_capacity: Optional[int] = None
    current_registrations: int
    is_active: bool
    requires_registration: bool

    model_config = {"from_attributes": True}
