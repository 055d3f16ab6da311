# app/services/notification_service.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app import crud
from app.core.exceptions import NotFoundError
from app.models.notification import Notification
from app.schemas.notification import Notification as NotificationSchema, NotificationList
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    *,
    user_id: str,
    kind: str,
    title: str,
    message: str,
    related_type: Optional[str] = None,
    related_id: Optional[str] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=kind,
        title=title,
        message=message,
        related_entity_type=related_type,
        related_entity_id=related_id,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def notify_safely(db: Session, **kwargs) -> Optional[Notification]:
    """
    Post-commit side effect: a failure is logged and swallowed so it never
    reverses the primary write or the response.
    """
    try:
        return create_notification(db, **kwargs)
    except Exception:
        logger.error(
            f"Failed to create '{kwargs.get('kind')}' notification for user {kwargs.get('user_id')}",
            exc_info=True,
            extra={"user_id": kwargs.get("user_id"), "kind": kwargs.get("kind")},
        )
        db.rollback()
        return None


def list_notifications(
    db: Session, *, user_id: str, limit: int = 10, unread_only: bool = False
) -> NotificationList:
    items = crud.notification.get_multi_by_user(
        db, user_id=user_id, limit=limit, unread_only=unread_only
    )
    return NotificationList(
        data=[NotificationSchema.model_validate(item) for item in items],
        unread_count=crud.notification.count_unread(db, user_id=user_id),
    )


def mark_as_read(
    db: Session, *, notification_id: str, user_id: str, now=None
) -> Notification:
    notification = crud.notification.get_for_user(
        db, notification_id=notification_id, user_id=user_id
    )
    if notification is None:
        raise NotFoundError("Notification not found", code="NOTIFICATION_NOT_FOUND")

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = now or utcnow()
        db.commit()
        db.refresh(notification)
    return notification
