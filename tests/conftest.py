"""Pytest configuration and shared fixtures."""
from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import questboard.models  # noqa: F401  (registers every table on Base)
from questboard.core.rate_limit import limiter
from questboard.database import Base, get_db
from questboard.main import app
from questboard.models import Achievement, Task, User
from questboard.services.storage_service import storage_service


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_db(db_session):
    """Session with default categories, achievements and the default user (id 1)"""
    storage_service.seed_defaults(db_session)
    return db_session


@pytest.fixture
def make_user(db_session):
    def _make_user(username: str, score: int = 0, region: str = "Global", country: str = "Global") -> User:
        return storage_service.create_user(
            db_session, username=username, score=score, region=region, country=country
        )
    return _make_user


@pytest.fixture
def make_task(db_session):
    def _make_task(
        user: Optional[User] = None,
        title: str = "Task",
        priority: str = "medium",
        difficulty: str = "normal",
        points: int = 10,
        **extra: Any
    ) -> Task:
        return storage_service.create_task(
            db_session,
            title=title,
            priority=priority,
            difficulty=difficulty,
            points=points,
            user_id=user.id if user else None,
            **extra
        )
    return _make_task


@pytest.fixture
def make_achievement(db_session):
    def _make_achievement(name: str, category: str, requirement: int, points: int = 10) -> Achievement:
        return storage_service.create_achievement(
            db_session, name=name, category=category, requirement=requirement, points=points
        )
    return _make_achievement


class StubRoadmapService:
    """Stands in for the AI roadmap client"""

    def __init__(self, roadmap: Dict[str, Any], tips=None):
        self.roadmap = roadmap
        self.tips = tips or ["tip one", "tip two", "tip three"]
        self.calls = []
        self.tip_contexts = []

    def generate_roadmap(self, goal):
        self.calls.append(goal.id)
        return self.roadmap

    def generate_productivity_tips(self, context):
        self.tip_contexts.append(context)
        return self.tips


SAMPLE_ROADMAP = {
    "overview": "Build running endurance gradually.",
    "milestones": [
        {
            "title": "Foundation",
            "tasks": [
                {"title": "Buy running shoes", "description": "Get fitted at a store", "priority": "high", "difficulty": "easy", "estimated_time": "2 hours"},
                {"title": "Run 2km", "priority": "URGENT", "difficulty": "brutal"},
                {"description": "missing a title"},
            ],
        },
        {
            "title": "Build up",
            "tasks": [{"title": "Run 10km", "priority": "high", "difficulty": "hard"}],
        },
    ],
}


@pytest.fixture
def stub_roadmap():
    return StubRoadmapService(SAMPLE_ROADMAP)


@pytest.fixture
def client(engine, seeded_db):
    """API client bound to the test database; lifespan startup is not run"""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True
