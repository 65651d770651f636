"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from release_control_tower.api import create_app
from release_control_tower.config import Settings
from release_control_tower.db.base import Database
from release_control_tower.db.store import ReleaseStore
from release_control_tower.releases.lifecycle import ReleaseLifecycleManager
from release_control_tower.releases.resolver import VersionResolver
from release_control_tower.releases.update_check import UpdateDecisionEngine


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a private in-memory database."""
    return Settings(database_url="sqlite://", db_auto_create=True, log_level="WARNING")


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """In-memory SQLite shared by every session of one test (StaticPool)."""
    database = Database("sqlite://")
    database.initialize()
    database.create_all()
    yield database
    database.shutdown()


@pytest.fixture
def db_session(database) -> Generator[Session, None, None]:
    """Get a test database session."""
    session = database.session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def store(db_session) -> ReleaseStore:
    return ReleaseStore(db_session)


@pytest.fixture
def lifecycle(store) -> ReleaseLifecycleManager:
    return ReleaseLifecycleManager(store)


@pytest.fixture
def resolver(store) -> VersionResolver:
    return VersionResolver(store)


@pytest.fixture
def engine(resolver) -> UpdateDecisionEngine:
    return UpdateDecisionEngine(resolver)


@pytest.fixture
def app(settings, database):
    """Application bound to the test database."""
    app = create_app(settings=settings, database=database)
    app.state.database = database
    return app


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Get a test client."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def frozen_clock(monkeypatch):
    """Make the store's clock tick one second per call from a fixed start."""
    start = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    ticks = {"n": 0}

    def fake_now() -> datetime:
        value = start + timedelta(seconds=ticks["n"])
        ticks["n"] += 1
        return value

    monkeypatch.setattr("release_control_tower.db.store.utc_now", fake_now)
    return start


def release_data(**overrides: Any) -> Dict[str, Any]:
    """Valid release input for testing."""
    data = {
        "platform": "android",
        "version": "1.0.0",
        "package_url": "https://cdn.example.com/app_1.0.0.apk",
        "release_notes": "Bug fixes",
        "file_size": 52428800,
        "file_hash": "9e107d9d372bb6826bd81d3542a419d6",
        "is_force_update": False,
    }
    data.update(overrides)
    return data
