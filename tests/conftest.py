"""Pytest fixtures for service and API tests."""

import os
import uuid
from collections.abc import Generator
from datetime import datetime, timedelta, timezone

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from studyquest.api.deps import get_db
from studyquest.core.security import create_access_token
from studyquest.db import models  # noqa: F401  # Imported for side effects
from studyquest.db.base import Base
from studyquest.db.models import Achievement, Course, GradedItem, User, Wager
from studyquest.main import create_app
from studyquest.utils.cache import cache_backend

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clear_cache() -> Generator[None, None, None]:
    cache_backend.clear()
    try:
        yield
    finally:
        cache_backend.clear()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session):
    def _make(plan: str = "free", **fields) -> User:
        user = User(
            email=fields.pop("email", f"student-{uuid.uuid4().hex[:8]}@example.com"),
            display_name=fields.pop("display_name", "Test Student"),
            plan=plan,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def make_course(db_session):
    def _make(user: User, title: str = "Biology 101", grade: float | None = None) -> Course:
        course = Course(user_id=user.id, title=title, grade=grade)
        db_session.add(course)
        db_session.commit()
        return course

    return _make


@pytest.fixture()
def make_item(db_session):
    def _make(
        user: User,
        course: Course,
        title: str = "Quiz 1",
        *,
        item_type: str = "quiz",
        due_date: datetime | None = NOW + timedelta(days=7),
        grade: float | None = None,
        status: str = "upcoming",
        points_possible: int | None = 100,
    ) -> GradedItem:
        item = GradedItem(
            user_id=user.id,
            course_id=course.id,
            title=title,
            item_type=item_type,
            due_date=due_date,
            grade=grade,
            status=status,
            points_possible=points_possible,
        )
        db_session.add(item)
        db_session.commit()
        return item

    return _make


@pytest.fixture()
def grant_points(db_session):
    """Give a user an unlocked achievement row worth ``points``."""

    def _grant(user: User, points: int, *, progress: int = 100) -> Achievement:
        achievement = Achievement(
            user_id=user.id,
            title=f"Seeded {uuid.uuid4().hex[:8]}",
            description="Seeded for tests",
            difficulty="easy",
            points=points,
            requirement={},
            progress=progress,
            unlocked=progress == 100,
            unlocked_at=NOW if progress == 100 else None,
        )
        db_session.add(achievement)
        db_session.commit()
        return achievement

    return _grant


@pytest.fixture()
def make_wager(db_session):
    """Insert a wager row directly, bypassing placement checks."""

    def _make(
        user: User,
        item: GradedItem,
        amount: float,
        *,
        multiplier: float = 1.0,
        required_score: int = 65,
        resolved: bool = False,
        won: bool | None = None,
        points_awarded: float | None = None,
    ) -> Wager:
        wager = Wager(
            user_id=user.id,
            item_id=item.id,
            course_id=item.course_id,
            title=item.title,
            amount=amount,
            multiplier=multiplier,
            base_score=65,
            required_score=required_score,
            resolved=resolved,
            won=won,
            points_awarded=points_awarded,
        )
        db_session.add(wager)
        db_session.commit()
        return wager

    return _make


@pytest.fixture()
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
