import pytest

from app.core.exceptions import ForbiddenError
from app.core.permissions import Action, RoleId, authorize, is_allowed
from app.schemas.token import Principal

ADMIN = Principal(user_id="usr_admin", email="admin@university.edu", role=RoleId.ADMIN)
ORGANIZER = Principal(user_id="usr_org", email="org@university.edu", role=RoleId.ORGANIZER)
USER = Principal(user_id="usr_user", email="user@university.edu", role=RoleId.USER)


@pytest.mark.parametrize("action", list(Action))
def test_admin_is_allowed_everything(action):
    assert is_allowed(action, ADMIN, ["someone_else"])


def test_only_organizers_create_events():
    assert is_allowed(Action.CREATE_EVENT, ORGANIZER)
    assert not is_allowed(Action.CREATE_EVENT, USER)


def test_attendance_requires_owning_organizer():
    assert is_allowed(Action.MARK_ATTENDANCE, ORGANIZER, [ORGANIZER.user_id])
    assert not is_allowed(Action.MARK_ATTENDANCE, ORGANIZER, ["usr_other_org"])
    # Owning the id is not enough without the organizer role
    assert not is_allowed(Action.MARK_ATTENDANCE, USER, [USER.user_id])


def test_registration_visible_to_registrant_and_organizer():
    owners = [USER.user_id, ORGANIZER.user_id]
    assert is_allowed(Action.VIEW_REGISTRATION, USER, owners)
    assert is_allowed(Action.VIEW_REGISTRATION, ORGANIZER, owners)
    outsider = Principal(user_id="usr_x", email="x@university.edu", role=RoleId.USER)
    assert not is_allowed(Action.VIEW_REGISTRATION, outsider, owners)


def test_manage_users_is_admin_only():
    assert not is_allowed(Action.MANAGE_USERS, ORGANIZER, [ORGANIZER.user_id])
    assert not is_allowed(Action.MANAGE_USERS, USER, [USER.user_id])


def test_authorize_raises_forbidden_with_action():
    with pytest.raises(ForbiddenError) as exc_info:
        authorize(Action.VIEW_ORGANIZER_DASHBOARD, USER)
    assert exc_info.value.status_code == 403
    assert exc_info.value.details == {"action": "view_organizer_dashboard"}
