import uuid

from sqlalchemy.orm import Session

from app.core.permissions import RoleId
from app.core.security import get_password_hash
from app.models.user import User

DEFAULT_PASSWORD = "Password123"

# Hashing is slow; every test user shares one hash of DEFAULT_PASSWORD
_DEFAULT_HASH = get_password_hash(DEFAULT_PASSWORD)


def random_email() -> str:
    return f"user_{uuid.uuid4().hex[:8]}@university.edu"


def create_random_user(
    db: Session,
    role_id: int = RoleId.USER,
    is_active: bool = True,
    email: str | None = None,
) -> User:
    """
    Creates a dummy user for testing purposes.
    """
    user = User(
        name="Test User",
        email=email or random_email(),
        password_hash=_DEFAULT_HASH,
        role_id=int(role_id),
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_organizer(db: Session) -> User:
    return create_random_user(db, role_id=RoleId.ORGANIZER)


def create_admin(db: Session) -> User:
    return create_random_user(db, role_id=RoleId.ADMIN)
