"""
Shared pytest fixtures.

Uses a throwaway SQLite database so no Postgres is required for tests.
Each test works under its own user_id, so rows never collide.
"""
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from circohback.db.base import Base, get_db
from circohback.main import app
from circohback.services.activity_log import Activity
from circohback.services.growth_config import GrowthConfig
import circohback.models  # noqa: F401

SQLITE_URL = "sqlite:///./test_circohback.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def user_id() -> str:
    return f"user-{uuid.uuid4().hex[:12]}"


# ---------------------------------------------------------------------------
# Pure-computation helpers
# ---------------------------------------------------------------------------

EXAMPLE_CONFIG = {
    "levels": [
        {"level": 1, "title": "Novice", "threshold": 0, "color": "#BE93FD"},
        {"level": 2, "title": "Connector", "threshold": 100, "color": "#BE93FD"},
        {"level": 3, "title": "Networker", "threshold": 300, "color": "#32FFA5"},
        {"level": 4, "title": "Luminary", "threshold": 700, "color": "#FF93B9"},
    ],
    "categories": [
        {"key": "consistency", "title": "Consistency", "cap": 200,
         "recommendations": ["Complete a reminder today"]},
        {"key": "empathy", "title": "Empathy", "cap": 200,
         "recommendations": ["Call someone"]},
    ],
    "activity_types": [
        {"type": "reminder", "category": "consistency", "points": 50},
        {"type": "call", "category": "empathy", "points": 110},
        {"type": "note", "category": None, "points": 5},
    ],
    "general_recommendations": ["Keep going"],
}


@pytest.fixture()
def example_config() -> GrowthConfig:
    """thresholds [0, 100, 300, 700]; caps consistency=200, empathy=200."""
    return GrowthConfig.from_mapping(EXAMPLE_CONFIG)


def make_activity(
    activity_id: int,
    type_: str,
    category,
    points: int,
    when: datetime = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc),
) -> Activity:
    return Activity(id=activity_id, type=type_, category=category, points=points, date=when)
