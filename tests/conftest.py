"""
Pytest configuration for the task service tests.

DATABASE_URL is pinned before any app imports so that cached settings
never point at a real database file.
"""

import os
import sys
from pathlib import Path

# --- Environment setup (before ANY app imports) ---
os.environ["DATABASE_URL"] = "sqlite://"

# Add project root so `from task_service.xxx import ...` works
sys.path.insert(0, str(Path(__file__).parent.parent))
# Add tests dir so `from factories import ...` works
sys.path.insert(0, str(Path(__file__).parent))

import pytest

from fastapi.testclient import TestClient

from task_service.config import Settings
from task_service.crud import TaskStore
from task_service.database import Database
from task_service.main import create_app


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def database():
    """SQLite in-memory database, fresh for every test."""
    db = Database("sqlite://")
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    """Provide a SQLAlchemy session for store tests."""
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session):
    return TaskStore(db_session)


@pytest.fixture
def app(database):
    return create_app(Settings(database_url="sqlite://"), database=database)


@pytest.fixture
def client(app):
    """TestClient running the app lifespan against the test database."""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
