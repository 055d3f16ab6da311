from app.core.security import create_access_token
from app.models.user import User
from app.schemas.token import Principal


def get_user_authentication_headers(user: User) -> dict[str, str]:
    """
    Generates a valid access token and authentication headers for a test user.
    """
    token = create_access_token(user.id, user.email, user.role_id)
    return {"Authorization": f"Bearer {token}"}


def principal_for(user: User) -> Principal:
    return Principal(user_id=user.id, email=user.email, role=user.role_id)
