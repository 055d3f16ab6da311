# app/api/v1/endpoints/dashboard.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.core.permissions import Action, authorize
from app.db.session import get_db
from app.schemas.activity import UserActivity
from app.schemas.dashboard import OrganizerStats, UpcomingEvent
from app.schemas.notification import Notification, NotificationList
from app.schemas.token import Principal
from app.services import notification_service, stats_service

router = APIRouter(prefix="/dashboard/organizer", tags=["Dashboard"])


@router.get("/stats", response_model=OrganizerStats)
def organizer_stats(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return stats_service.get_organizer_stats(db, actor=current_user)


@router.get("/upcoming-events", response_model=List[UpcomingEvent])
def organizer_upcoming_events(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return stats_service.get_organizer_upcoming_events(db, actor=current_user, limit=limit)


@router.get("/notifications", response_model=NotificationList)
def organizer_notifications(
    limit: int = Query(10, ge=1, le=100),
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    authorize(
        Action.VIEW_ORGANIZER_DASHBOARD,
        current_user,
        message="You do not have permission to view these notifications",
    )
    return notification_service.list_notifications(
        db, user_id=current_user.user_id, limit=limit, unread_only=unread_only
    )


@router.post("/notifications/{notification_id}/read", response_model=Notification)
def organizer_mark_notification_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return notification_service.mark_as_read(
        db, notification_id=notification_id, user_id=current_user.user_id
    )


@router.get("/recent-activity", response_model=List[UserActivity])
def organizer_recent_activity(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(deps.get_current_user),
):
    return stats_service.get_recent_activity(db, actor=current_user, limit=limit)
