# app/api/v1/endpoints/notifications.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.schemas.notification import Notification, NotificationList
from app.schemas.token import Principal
from app.services import notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationList)
def list_notifications(
    limit: int = Query(10, ge=1, le=100),
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return notification_service.list_notifications(
        db, user_id=current_user.user_id, limit=limit, unread_only=unread_only
    )


@router.post("/{notification_id}/read", response_model=Notification)
def mark_notification_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return notification_service.mark_as_read(
        db, notification_id=notification_id, user_id=current_user.user_id
    )
