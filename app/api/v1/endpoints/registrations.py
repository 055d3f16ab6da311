# app/api/v1/endpoints/registrations.py
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Request
from sqlalchemy.orm import Session

from app.api import deps
from app.core import email
from app.db.session import get_db
from app.schemas.registration import (
    AttendanceResult,
    BulkCheckIn,
    BulkCheckInResult,
    Registration,
    RegistrationCancel,
    RegistrationDetail,
)
from app.schemas.token import Principal
from app.services import registration_service

router = APIRouter(prefix="/registrations", tags=["Registrations"])


@router.post("/bulk-check-in", response_model=BulkCheckInResult)
def bulk_check_in(
    body: BulkCheckIn,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ORGANIZER/ADMIN]** Check in a batch of attendance codes; results are per code."""
    return registration_service.bulk_check_in(
        db, qr_codes=body.qr_codes, actor=current_user
    )


@router.get("/{registration_id}", response_model=RegistrationDetail)
def get_registration(
    registration_id: str,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return registration_service.get_registration(
        db, registration_id=registration_id, actor=current_user
    )


@router.delete("/{registration_id}", response_model=Registration)
def cancel_registration(
    registration_id: str,
    request: Request,
    body: Optional[RegistrationCancel] = Body(None),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """Cancel the caller's own registration, at least 24 hours before the event."""
    return registration_service.cancel_registration(
        db,
        registration_id=registration_id,
        actor=current_user,
        reason=body.reason if body else None,
        request_meta=deps.get_request_meta(request),
    )


@router.post("/{registration_id}/check-in", response_model=AttendanceResult)
def check_in(
    registration_id: str,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """**[ORGANIZER/ADMIN]** Record arrival. Repeating it returns the stored time."""
    return registration_service.check_in(
        db, registration_id=registration_id, actor=current_user
    )


@router.post("/{registration_id}/check-out", response_model=AttendanceResult)
def check_out(
    registration_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    """
    **[ORGANIZER/ADMIN]** Record departure. For events that grant certificates
    a pending certificate is created and the participant is emailed.
    """
    outcome = registration_service.check_out(
        db, registration_id=registration_id, actor=current_user
    )
    if outcome.email:
        background_tasks.add_task(email.send_certificate_pending, **outcome.email)
    return outcome.result
