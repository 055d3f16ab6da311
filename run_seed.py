#!/usr/bin/env python3
"""
Seed script

Inserts roles, the administrator account and default categories. Run after
`alembic upgrade head`.
"""
import logging
import os
import sys

# Add the app directory to the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.core.config import settings
from app.db.init_db import init_db
from app.db.session import SessionLocal

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("seed")


def main() -> None:
    db = SessionLocal()
    try:
        init_db(db)
        logger.info("Seed completed")
    finally:
        db.close()


if __name__ == "__main__":
    main()
