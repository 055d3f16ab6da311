# app/schemas/activity.py
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class UserActivity(BaseModel):
    id: str
    user_id: str
    activity_type: str
    description: str
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[str] = None
    metadata: Optional[Any] = Field(None, validation_alias="activity_metadata")
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
