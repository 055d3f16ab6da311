# app/db/init_db.py
"""
Reference data every deployment needs: the three roles, an administrator
account and the default event categories. Safe to run repeatedly.
"""

import logging

from sqlalchemy.orm import Session

from app import crud
from app.core.config import settings
from app.core.permissions import RoleId
from app.models.category import Category
from app.models.role import Role
from app.schemas.user import UserCreate

logger = logging.getLogger(__name__)

ROLES = {
    RoleId.ADMIN: "Administrator",
    RoleId.USER: "User",
    RoleId.ORGANIZER: "Organizer",
}

DEFAULT_CATEGORIES = [
    ("Conference", "Talks by academic and industry speakers", "#1C8443"),
    ("Workshop", "Hands-on practical sessions", "#41AD49"),
    ("Seminar", "Focused academic discussion sessions", "#8DC642"),
    ("Course", "Multi-session training programs", "#38A2C1"),
    ("Hackathon", "Team programming and innovation challenges", "#67DCD7"),
]


def init_db(db: Session) -> None:
    for role_id, name in ROLES.items():
        if db.get(Role, int(role_id)) is None:
            db.add(Role(id=int(role_id), name=name))
            logger.info(f"Seeded role {name}")
    db.commit()

    if crud.user.get_by_email(db, email=settings.ADMIN_EMAIL) is None:
        crud.user.create(
            db,
            obj_in=UserCreate(
                name="Administrator",
                email=settings.ADMIN_EMAIL,
                password=settings.ADMIN_PASSWORD,
            ),
            role_id=RoleId.ADMIN,
        )
        logger.info(f"Seeded administrator {settings.ADMIN_EMAIL}")

    for name, description, color in DEFAULT_CATEGORIES:
        if crud.category.get_by_name(db, name=name) is None:
            db.add(Category(name=name, description=description, color=color))
            logger.info(f"Seeded category {name}")
    db.commit()
