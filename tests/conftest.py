# tests/conftest.py

import os

# Must be set before the app (and its settings) are imported
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL_LOCAL", "sqlite://")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RESEND_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy_utils import create_database, database_exists, drop_database

from app.main import app
from app.db.base_class import Base
from app.db.init_db import init_db
from app.db.session import get_db
from app import models  # noqa: F401  registers every table on Base.metadata


# --- Test Database Setup ---
# In-memory SQLite by default; point TEST_DATABASE_URL at a throwaway
# PostgreSQL database to run the suite against the production dialect.
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")

if TEST_DATABASE_URL:
    engine = create_engine(TEST_DATABASE_URL)
else:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _configure_sqlite(dbapi_connection, connection_record):
        # Let SQLAlchemy drive BEGIN/SAVEPOINT itself so nested transactions work
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_sqlite(conn):
        conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    if TEST_DATABASE_URL:
        if database_exists(engine.url):
            drop_database(engine.url)
        create_database(engine.url)
    Base.metadata.create_all(bind=engine)

    # Roles, the administrator and default categories, committed once
    seed = TestingSessionLocal()
    try:
        init_db(seed)
    finally:
        seed.close()

    yield

    Base.metadata.drop_all(bind=engine)
    if TEST_DATABASE_URL:
        drop_database(engine.url)


@pytest.fixture(scope="function")
def db():
    """
    A session bound to an outer transaction that is rolled back after the
    test. Service-level commits only release savepoints inside it.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(
        bind=connection, join_transaction_mode="create_savepoint"
    )
    yield session
    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db):
    """TestClient running against the per-test transaction; auth is real JWT."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
