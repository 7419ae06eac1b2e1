"""Tests for Celery background tasks."""
from __future__ import annotations

import uuid
from unittest.mock import patch

import pytest
from sqlalchemy.orm import sessionmaker

from studyquest.db.models.achievement import Achievement
from studyquest.db.models.wager import Wager
from studyquest.tasks.achievements import evaluate_user_achievements
from studyquest.tasks.notifications import announce_achievement_unlock
from studyquest.tasks.wagers import resolve_user_wagers


@pytest.fixture()
def task_session_factory(db_session):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db_session.bind)
    sessions: list = []

    def create_session():
        session = factory()
        sessions.append(session)
        return session

    try:
        yield create_session
    finally:
        for session in sessions:
            session.close()


def test_evaluate_user_achievements(db_session, task_session_factory, make_user):
    user = make_user(prefers_dark_mode=True)

    with patch(
        "studyquest.tasks.achievements.SessionLocal", side_effect=task_session_factory
    ), patch.object(announce_achievement_unlock, "delay") as delay:
        result = evaluate_user_achievements.run(str(user.id))

    assert result["user_id"] == str(user.id)
    assert result["created"] == 10
    assert result["newly_unlocked"] == ["Day N Nite"]
    assert result["failed"] == []
    delay.assert_called_once_with(str(user.id), "Day N Nite", "Enable dark mode in the application", 10)

    rows = db_session.query(Achievement).filter_by(user_id=user.id).all()
    assert len(rows) == 10


def test_evaluate_user_achievements_rejects_bad_ids(task_session_factory):
    with patch("studyquest.tasks.achievements.SessionLocal", side_effect=task_session_factory):
        with pytest.raises(ValueError):
            evaluate_user_achievements.run("not-a-uuid")
        with pytest.raises(ValueError):
            evaluate_user_achievements.run(str(uuid.uuid4()))


def test_resolve_user_wagers(db_session, task_session_factory, make_user, make_course, make_item, make_wager):
    user = make_user()
    course = make_course(user)
    won_item = make_item(user, course, "Quiz 1", grade=90, status="completed")
    pending_item = make_item(user, course, "Quiz 2")
    make_wager(user, won_item, 10, multiplier=1.2, required_score=77)
    make_wager(user, pending_item, 5)

    with patch("studyquest.tasks.wagers.SessionLocal", side_effect=task_session_factory):
        result = resolve_user_wagers.run(str(user.id))

    assert result["resolved"] == 1
    assert result["won"] == 1
    assert result["points_awarded"] == pytest.approx(12)

    db_session.expire_all()
    assert db_session.query(Wager).filter_by(user_id=user.id, resolved=False).count() == 1


def test_announce_achievement_unlock(task_session_factory, make_user):
    user = make_user()

    with patch("studyquest.tasks.notifications.SessionLocal", side_effect=task_session_factory):
        delivered = announce_achievement_unlock.run(str(user.id), "Good Looks", "Upload a profile picture", 10)
        skipped = announce_achievement_unlock.run(str(uuid.uuid4()), "Good Looks", None, 10)

    assert delivered["delivered"] is True
    assert skipped["delivered"] is False
