"""Pytest fixtures — per-test SQLite database for fast, isolated tests."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-for-dayplanner-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DISPLAY_TIMEZONE", "UTC")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from dayplanner.database import Base, get_db
from dayplanner.main import app

# Import all models so they register with Base.metadata
from dayplanner.models.user import User    # noqa: F401
from dayplanner.models.event import Event  # noqa: F401


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the per-test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: register a user / create an event via the API
# ---------------------------------------------------------------------------
def register_user(client: TestClient, email: str = "user@example.com", password: str = "secret123") -> dict:
    """Helper — POST /api/auth/register and return response JSON."""
    resp = client.post("/api/auth/register", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth_headers(session: dict) -> dict:
    return {"Authorization": f"Bearer {session['token']}"}


def create_event(client: TestClient, session: dict, **fields) -> dict:
    """Helper — POST /api/events with sensible defaults, return response JSON."""
    payload = {
        "title": "Test Event",
        "startTime": "2024-01-08T09:00:00Z",
        "endTime": "2024-01-08T09:30:00Z",
    }
    payload.update(fields)
    resp = client.post("/api/events/", json=payload, headers=auth_headers(session))
    assert resp.status_code == 201, resp.text
    return resp.json()
