# app/services/activity_service.py
"""
Append-only user activity log.

Inside a business transaction the row is only added to the session
(``commit=False``) so it lands or rolls back with the rest of the write.
Stand-alone entries commit on their own and never fail the caller.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import crud
from app.models.user_activity import UserActivity
from app.schemas.activity import UserActivity as UserActivitySchema
from app.schemas.common import Page, Pagination

logger = logging.getLogger(__name__)


def log_activity(
    db: Session,
    *,
    user_id: str,
    activity_type: str,
    description: str,
    related_type: Optional[str] = None,
    related_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    request_meta: Optional[Dict[str, Optional[str]]] = None,
    commit: bool = False,
) -> Optional[UserActivity]:
    request_meta = request_meta or {}
    activity = UserActivity(
        user_id=user_id,
        activity_type=activity_type,
        description=description,
        related_entity_type=related_type,
        related_entity_id=related_id,
        activity_metadata=metadata,
        ip_address=request_meta.get("ip_address"),
        user_agent=request_meta.get("user_agent"),
    )
    db.add(activity)
    if not commit:
        return activity

    try:
        db.commit()
        return activity
    except SQLAlchemyError:
        logger.error(
            f"Failed to log activity '{activity_type}' for user {user_id}",
            exc_info=True,
            extra={"user_id": user_id, "activity_type": activity_type},
        )
        db.rollback()
        return None


def get_user_activities(
    db: Session, *, user_id: str, page: int = 1, limit: int = 20
) -> Page[UserActivitySchema]:
    items, total = crud.user_activity.get_multi_by_user(
        db, user_id=user_id, skip=(page - 1) * limit, limit=limit
    )
    return Page[UserActivitySchema](
        data=[UserActivitySchema.model_validate(item) for item in items],
        pagination=Pagination.build(page, limit, total),
    )
