# app/schemas/certificate.py
from datetime import datetime

from pydantic import BaseModel


class Certificate(BaseModel):
    id: str
    user_id: str
    event_id: str
    event_registration_id: str
    certificate_number: str
    verification_code: str
    title: str
    participation_type: str
    status: str
    issued_date: datetime

    model_config = {"from_attributes": True}
