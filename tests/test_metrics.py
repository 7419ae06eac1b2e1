"""Tests for metrics collection."""
from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from studyquest.core.achievements import MetricsSnapshot
from studyquest.services.activity import ActivityService, UserNotFoundError
from studyquest.services.metrics import MetricsCollector


def test_collect_counts_persisted_activity(db_session, make_user, make_course, make_item, grant_points) -> None:
    user = make_user(has_profile_picture=True, lms_sync_count=3)
    biology = make_course(user, "Biology", grade=92)
    make_course(user, "History", grade=84)
    make_item(user, biology, "Homework 1", item_type="assignment", status="completed", grade=50, points_possible=50)
    make_item(user, biology, "Homework 2", item_type="assignment", status="completed", grade=0)
    make_item(user, biology, "Quiz 1", grade=0)
    make_item(user, biology, "Quiz 2")
    grant_points(user, 10)
    grant_points(user, 30, progress=40)

    metrics = MetricsCollector(db_session).collect(user.id)

    assert metrics.assignment_complete_count == 2
    assert metrics.perfect_grade_count == 1
    assert metrics.course_grades_above[90] == 1
    assert metrics.course_grades_above[80] == 2
    assert metrics.course_grades_above[70] == 2
    assert metrics.lms_sync_count == 3
    assert metrics.has_profile_picture is True
    assert metrics.prefers_dark_mode is False
    assert metrics.unlocked_achievements_count == 1
    assert metrics.total_achievements_count == 2
    assert metrics.is_empty is False


def test_collect_for_new_user_is_empty(db_session, make_user) -> None:
    user = make_user()

    metrics = MetricsCollector(db_session).collect(user.id)

    assert metrics.is_empty is True


def test_collect_falls_back_to_empty_snapshot(db_session, make_user, monkeypatch) -> None:
    user = make_user(has_profile_picture=True)
    collector = MetricsCollector(db_session)

    def broken(_user_id):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setattr(collector, "_collect", broken)

    metrics = collector.collect(user.id)

    assert metrics == MetricsSnapshot.empty()
    assert metrics.is_empty is True


def test_recorded_activity_shows_up_in_metrics(db_session, make_user) -> None:
    user = make_user()
    activity = ActivityService(db_session)

    activity.record_lms_sync(user)
    activity.record_lms_sync(user)
    activity.set_profile_picture(user, True)
    activity.set_theme(user, "dark")

    metrics = MetricsCollector(db_session).collect(user.id)

    assert metrics.lms_sync_count == 2
    assert metrics.has_profile_picture is True
    assert metrics.prefers_dark_mode is True

    activity.set_theme(user, "light")
    assert MetricsCollector(db_session).collect(user.id).prefers_dark_mode is False


def test_activity_rejects_unknown_theme_and_user(db_session, make_user) -> None:
    activity = ActivityService(db_session)

    with pytest.raises(ValueError):
        activity.set_theme(make_user(), "sepia")
    with pytest.raises(UserNotFoundError):
        activity.get(uuid.uuid4())
