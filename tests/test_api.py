"""End-to-end tests for the wager, odds, activity and fixture endpoints."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from studyquest.config import settings
from studyquest.core.security import create_access_token
from studyquest.services.odds import OddsService
from studyquest.services.wager import WagerService
from studyquest.utils.exceptions import DataStoreError

SOON = datetime.now(timezone.utc) + timedelta(days=5)


@pytest.fixture()
def bettor(make_user, make_course, make_item, grant_points):
    user = make_user(plan="premium")
    grant_points(user, 40)
    course = make_course(user)
    item = make_item(user, course, "Midterm", item_type="exam", due_date=SOON)
    return user, course, item


def test_requests_without_valid_token_are_rejected(client: TestClient, make_user) -> None:
    user = make_user()

    assert client.get("/api/v1/points").status_code == 401
    bad = client.get("/api/v1/points", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401
    expired = create_access_token(user.id, expires_minutes=-5)
    assert client.get("/api/v1/points", headers={"Authorization": f"Bearer {expired}"}).status_code == 401


def test_place_wager(client: TestClient, bettor, auth_headers) -> None:
    user, _, item = bettor

    response = client.post(
        "/api/v1/wagers",
        json={"item_id": str(item.id), "amount": 40, "multiplier": 3.0},
        headers=auth_headers(user),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["amount"] == 40
    assert body["required_score"] == 85
    assert body["resolved"] is False

    points = client.get("/api/v1/points", headers=auth_headers(user)).json()
    assert points["staked_points"] == 40
    assert points["spendable_points"] == 0


@pytest.mark.parametrize(
    ("amount", "multiplier", "status_code", "code"),
    [
        (41, 1.0, 409, "insufficient_balance"),
        (10, 6.0, 403, "over_tier_limit"),
        (0, 1.0, 422, "invalid_amount"),
        (10, 0.5, 422, "invalid_multiplier"),
    ],
)
def test_rejected_wagers_carry_error_codes(
    client: TestClient, bettor, auth_headers, amount, multiplier, status_code, code
) -> None:
    user, _, item = bettor

    response = client.post(
        "/api/v1/wagers",
        json={"item_id": str(item.id), "amount": amount, "multiplier": multiplier},
        headers=auth_headers(user),
    )

    assert response.status_code == status_code
    assert response.json()["detail"]["code"] == code


def test_wager_on_graded_or_past_item(client: TestClient, bettor, make_item, auth_headers) -> None:
    user, course, _ = bettor
    graded = make_item(user, course, "Quiz 1", grade=70, status="completed", due_date=SOON)
    overdue = make_item(user, course, "Quiz 2", due_date=datetime.now(timezone.utc) - timedelta(days=1))
    headers = auth_headers(user)

    graded_response = client.post(
        "/api/v1/wagers", json={"item_id": str(graded.id), "amount": 5}, headers=headers
    )
    overdue_response = client.post(
        "/api/v1/wagers", json={"item_id": str(overdue.id), "amount": 5}, headers=headers
    )
    missing_response = client.post(
        "/api/v1/wagers", json={"item_id": str(course.id), "amount": 5}, headers=headers
    )

    assert graded_response.status_code == 409
    assert graded_response.json()["detail"]["code"] == "already_graded"
    assert overdue_response.status_code == 409
    assert overdue_response.json()["detail"]["code"] == "past_due"
    assert missing_response.status_code == 404
    assert missing_response.json()["detail"]["code"] == "item_not_found"


def test_store_outage_maps_to_503(client: TestClient, bettor, auth_headers, monkeypatch) -> None:
    user, _, item = bettor

    def unavailable(self, *args, **kwargs):
        raise DataStoreError("Could not place wager")

    monkeypatch.setattr(WagerService, "create_wager", unavailable)

    response = client.post(
        "/api/v1/wagers", json={"item_id": str(item.id), "amount": 5}, headers=auth_headers(user)
    )

    assert response.status_code == 503


def test_wager_history_stats_and_resolution(
    client: TestClient, db_session, bettor, auth_headers
) -> None:
    user, _, item = bettor
    headers = auth_headers(user)
    client.post("/api/v1/wagers", json={"item_id": str(item.id), "amount": 20}, headers=headers)

    listed = client.get("/api/v1/wagers", headers=headers).json()
    assert len(listed) == 1
    assert client.get("/api/v1/wagers/stats", headers=headers).json()["active_wagers"] == 1

    item.grade = 90
    item.status = "completed"
    db_session.commit()

    resolved = client.post("/api/v1/wagers/resolve", headers=headers)
    assert resolved.status_code == 200
    assert resolved.json()["total_resolved"] == 1
    assert resolved.json()["resolved"][0]["won"] is True

    again = client.post("/api/v1/wagers/resolve", headers=headers).json()
    assert again["total_resolved"] == 0

    stats = client.get("/api/v1/wagers/stats", headers=headers).json()
    assert stats == {"total_wagered": 20, "total_won": 20, "total_lost": 0, "active_wagers": 0}
    assert client.get("/api/v1/wagers", params={"include_resolved": False}, headers=headers).json() == []


def test_bettable_items_endpoint(client: TestClient, bettor, make_item, auth_headers) -> None:
    user, course, item = bettor
    make_item(user, course, "Reading", item_type="assignment", due_date=SOON)

    response = client.get("/api/v1/wagers/bettable", headers=auth_headers(user))

    assert response.status_code == 200
    assert [entry["item_id"] for entry in response.json()] == [str(item.id)]


def test_odds_endpoints(client: TestClient, bettor, make_item, auth_headers) -> None:
    user, course, _ = bettor
    for index, grade in enumerate((88, 90, 92)):
        make_item(user, course, f"Quiz {index}", grade=grade, status="completed")
    headers = auth_headers(user)

    estimate = client.get("/api/v1/odds/estimate", params={"course_id": str(course.id)}, headers=headers)
    assert estimate.status_code == 200
    assert estimate.json()["base_score"] == 90
    assert estimate.json()["confidence"] == 0.9

    quote = client.get("/api/v1/odds/quote", params={"multiplier": 1.5}, headers=headers).json()
    assert quote["tier"] == "premium"
    assert quote["required_score"] == 94

    limits = client.get("/api/v1/odds/limits", headers=headers).json()
    assert limits == {"tier": "premium", "max_multiplier": 5.0, "max_bet_percentage": 1.0}


def test_activity_endpoints_feed_achievements(client: TestClient, make_user, auth_headers) -> None:
    user = make_user()
    headers = auth_headers(user)

    synced = client.post("/api/v1/activity/lms-sync", headers=headers)
    assert synced.status_code == 200
    assert synced.json()["lms_sync_count"] == 1

    prefs = client.put(
        "/api/v1/activity/preferences",
        json={"theme": "dark", "has_profile_picture": True},
        headers=headers,
    )
    assert prefs.status_code == 200
    assert prefs.json()["prefers_dark_mode"] is True

    result = client.post("/api/v1/achievements/evaluate", headers=headers).json()
    assert set(result["newly_unlocked"]) == {"First Steps", "Good Looks", "Day N Nite"}

    points = client.get("/api/v1/points", headers=headers).json()
    assert points["total_points"] == 30


def test_preferences_require_a_field(client: TestClient, make_user, auth_headers) -> None:
    user = make_user()

    response = client.put("/api/v1/activity/preferences", json={}, headers=auth_headers(user))

    assert response.status_code == 422


def test_fixture_endpoints_hidden_by_default(client: TestClient, bettor, auth_headers) -> None:
    user, course, _ = bettor

    response = client.post(
        "/api/v1/fixtures/items", json={"course_id": str(course.id)}, headers=auth_headers(user)
    )

    assert response.status_code == 404


def test_fixture_endpoints_when_enabled(client: TestClient, bettor, auth_headers, monkeypatch) -> None:
    monkeypatch.setattr(settings, "ENABLE_FIXTURE_ITEMS", True)
    user, course, _ = bettor
    headers = auth_headers(user)

    created = client.post("/api/v1/fixtures/items", json={"course_id": str(course.id)}, headers=headers)
    assert created.status_code == 201
    item_id = created.json()["id"]
    assert created.json()["title"] == "Fake Test Assignment"

    placed = client.post("/api/v1/wagers", json={"item_id": item_id, "amount": 10}, headers=headers)
    assert placed.status_code == 201

    graded = client.post(f"/api/v1/fixtures/items/{item_id}/grade", json={"grade": 80}, headers=headers)
    assert graded.status_code == 200
    assert graded.json()["status"] == "completed"

    resolved = client.post("/api/v1/wagers/resolve", headers=headers).json()
    assert resolved["total_resolved"] == 1
    assert resolved["resolved"][0]["actual_score"] == 80


def test_unhandled_store_error_maps_to_503(client: TestClient, make_user, auth_headers, monkeypatch) -> None:
    user = make_user()

    def broken(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setattr(OddsService, "get_score_estimate", broken)

    response = client.get("/api/v1/odds/estimate", headers=auth_headers(user))

    assert response.status_code == 503


def test_target_multiplier_endpoint(client: TestClient, bettor, make_item, auth_headers) -> None:
    user, course, _ = bettor
    for index, grade in enumerate((88, 90, 92)):
        make_item(user, course, f"Quiz {index}", grade=grade, status="completed")
    headers = auth_headers(user)

    above = client.get(
        "/api/v1/odds/multiplier",
        params={"target_score": 99, "course_id": str(course.id)},
        headers=headers,
    )
    assert above.status_code == 200
    assert above.json()["estimate"]["base_score"] == 90
    assert above.json()["multiplier"] == 1.1

    below = client.get("/api/v1/odds/multiplier", params={"target_score": 80}, headers=headers).json()
    assert below["multiplier"] == 1.0

    out_of_range = client.get("/api/v1/odds/multiplier", params={"target_score": 120}, headers=headers)
    assert out_of_range.status_code == 422
