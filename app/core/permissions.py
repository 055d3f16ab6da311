# app/core/permissions.py
"""
Authorization policy.

Every role check in the service goes through ``is_allowed``; endpoints and
services never compare role ids inline.
"""

import enum
from typing import Iterable, Optional

from app.core.exceptions import ForbiddenError
from app.schemas.token import Principal


class RoleId(enum.IntEnum):
    ADMIN = 1
    USER = 2
    ORGANIZER = 3


class Action(str, enum.Enum):
    CREATE_EVENT = "create_event"
    MANAGE_EVENT = "manage_event"
    MARK_ATTENDANCE = "mark_attendance"
    VIEW_EVENT_REGISTRATIONS = "view_event_registrations"
    VIEW_REGISTRATION = "view_registration"
    VIEW_USER_REGISTRATIONS = "view_user_registrations"
    VIEW_USER = "view_user"
    MANAGE_USERS = "manage_users"
    VIEW_ORGANIZER_DASHBOARD = "view_organizer_dashboard"


def is_admin(actor: Principal) -> bool:
    return actor.role == RoleId.ADMIN


def is_organizer(actor: Principal) -> bool:
    return actor.role == RoleId.ORGANIZER


def is_allowed(
    action: Action, actor: Principal, owner_ids: Optional[Iterable[str]] = None
) -> bool:
    """
    `owner_ids` are the user ids that own the target resource: the event's
    organizer, the registrant, or the user whose data is being read.
    """
    if is_admin(actor):
        return True

    owners = set(owner_ids or ())

    if action in (Action.CREATE_EVENT, Action.VIEW_ORGANIZER_DASHBOARD):
        return is_organizer(actor)
    if action in (Action.MARK_ATTENDANCE, Action.VIEW_EVENT_REGISTRATIONS):
        return is_organizer(actor) and actor.user_id in owners
    if action in (
        Action.MANAGE_EVENT,
        Action.VIEW_REGISTRATION,
        Action.VIEW_USER_REGISTRATIONS,
        Action.VIEW_USER,
    ):
        return actor.user_id in owners
    # MANAGE_USERS and anything unknown
    return False


def authorize(
    action: Action,
    actor: Principal,
    owner_ids: Optional[Iterable[str]] = None,
    message: str = "You do not have permission to perform this action",
) -> None:
    if not is_allowed(action, actor, owner_ids):
        raise ForbiddenError(message, details={"action": action.value})
