"""Integration tests for the notification HTTP endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.exc import OperationalError

from listing_alerts.application.use_cases.notifications import NotificationDispatcher
from listing_alerts.config import get_settings
from listing_alerts.infrastructure.database import get_db
from listing_alerts.infrastructure.repositories import NotificationQueueRepository
from listing_alerts.infrastructure.security import ALGORITHM
from listing_alerts.interfaces.api.dependencies import get_notification_dispatcher
from listing_alerts.utils import now_in_app_timezone


@pytest.fixture()
def client(session_factory, sender):
    """Return a test client wired to the per-test database and sender."""

    from main import create_app

    app = create_app()

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_notification_dispatcher] = lambda: NotificationDispatcher(
        sender, session_factory, max_workers=2, send_timeout=5
    )
    with TestClient(app) as test_client:
        yield test_client


def _auth(user_id: str, *, expires_in: timedelta = timedelta(minutes=30)) -> dict[str, str]:
    """Build the header the accounts service would issue for ``user_id``."""

    token = jwt.encode(
        {"sub": user_id, "exp": datetime.now(timezone.utc) + expires_in},
        get_settings().secret_key,
        algorithm=ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(make_user) -> dict[str, str]:
    make_user("admin-1", role="ADMIN", notify=None)
    return _auth("admin-1")


def test_requests_require_a_valid_token(client: TestClient, make_user) -> None:
    make_user("user-1")

    assert client.get("/notifications/my-status").status_code == 401
    assert (
        client.get("/notifications/my-status", headers={"Authorization": "Bearer nope"}).status_code
        == 401
    )
    assert client.get("/notifications/my-status", headers=_auth("ghost")).status_code == 401
    expired = _auth("user-1", expires_in=timedelta(minutes=-1))
    assert client.get("/notifications/my-status", headers=expired).status_code == 401
    assert client.get("/notifications/admin/settings", headers=_auth("user-1")).status_code == 403


def test_admin_toggles_global_setting(client: TestClient, admin_headers) -> None:
    response = client.get("/notifications/admin/settings", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["enabled"] is True

    response = client.put(
        "/notifications/admin/settings", json={"enabled": False}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["enabled"] is False


def test_override_lifecycle(client: TestClient, admin_headers, make_user) -> None:
    make_user("user-1")
    expires_at = (now_in_app_timezone() + timedelta(days=2)).isoformat()

    response = client.post(
        "/notifications/admin/override",
        json={"email": "user-1@example.com", "mode": "BLOCK", "expires_at": expires_at},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["user_id"] == "user-1"

    response = client.get("/notifications/admin/override/user-1", headers=admin_headers)
    assert response.json()["mode"] == "BLOCK"

    status_response = client.get("/notifications/my-status", headers=_auth("user-1"))
    assert status_response.json()["is_blocked"] is True
    assert status_response.json()["can_receive"] is False
    assert client.get("/notifications/my-override", headers=_auth("user-1")).json()["mode"] == "BLOCK"

    assert client.delete("/notifications/admin/override/user-1", headers=admin_headers).status_code == 204
    assert client.delete("/notifications/admin/override/user-1", headers=admin_headers).status_code == 404
    assert client.get("/notifications/admin/override/user-1", headers=admin_headers).json() is None


def test_override_errors(client: TestClient, admin_headers, make_user) -> None:
    make_user("user-1")
    future = (now_in_app_timezone() + timedelta(days=1)).isoformat()
    past = (now_in_app_timezone() - timedelta(days=1)).isoformat()

    unknown = client.post(
        "/notifications/admin/override",
        json={"email": "ghost@example.com", "mode": "ALLOW", "expires_at": future},
        headers=admin_headers,
    )
    expired = client.post(
        "/notifications/admin/override",
        json={"user_id": "user-1", "mode": "ALLOW", "expires_at": past},
        headers=admin_headers,
    )
    missing_target = client.post(
        "/notifications/admin/override",
        json={"mode": "ALLOW", "expires_at": future},
        headers=admin_headers,
    )

    assert unknown.status_code == 404
    assert expired.status_code == 422
    assert missing_target.status_code == 422


def test_publish_is_safe_to_repeat(client: TestClient, admin_headers, make_user, make_ad, sender) -> None:
    make_user("buyer-1", filters={"cityIds": ["city-tlv"]})
    make_ad("ad-1")

    first = client.post("/notifications/admin/ads/ad-1/publish", headers=admin_headers)
    second = client.post("/notifications/admin/ads/ad-1/publish", headers=admin_headers)

    assert first.status_code == 200
    assert first.json()["success_count"] == 1
    assert second.json()["queued_count"] == 0
    assert sender.sent == [("buyer-1", "ad-1")]

    summary = client.get("/notifications/admin/queue/summary", headers=admin_headers)
    assert summary.json() == {"PENDING": 0, "SENDING": 0, "SENT": 1, "FAILED": 0}


def test_retry_failed_endpoint(client: TestClient, admin_headers, session, sender) -> None:
    queue = NotificationQueueRepository(session)
    (item,) = queue.enqueue("ad-1", ["buyer-1"])
    queue.claim(item.id, expected_status="PENDING")
    queue.mark_failed(item.id, "SMTP 451")

    response = client.post(
        "/notifications/admin/retry-failed", json={"limit": 10}, headers=admin_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["message"] == "Retried 1 notifications successfully"
    assert sender.sent == [("buyer-1", "ad-1")]


def test_storage_errors_map_to_503(client: TestClient, admin_headers, monkeypatch) -> None:
    from listing_alerts.interfaces.api.routes import notifications as routes_module

    def _unavailable(*args, **kwargs):
        raise OperationalError("UPDATE notification_queue", {}, Exception("database is locked"))

    monkeypatch.setattr(routes_module, "notify_new_listing", _unavailable)

    response = client.post("/notifications/admin/ads/ad-1/publish", headers=admin_headers)

    assert response.status_code == 503


def test_preferences_round_trip(client: TestClient, make_user) -> None:
    make_user("user-1", notify=None)
    headers = _auth("user-1")

    assert client.get("/notifications/preferences", headers=headers).json() == {
        "notifyNewMatches": False,
        "weeklyDigest": False,
        "filters": None,
    }

    response = client.put(
        "/notifications/preferences",
        json={
            "notifyNewMatches": True,
            "filters": {"cityIds": ["city-tlv"], "propertyTypes": ["דירה"], "minPrice": 0},
        },
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["notifyNewMatches"] is True
    assert response.json()["filters"] == {
        "cityIds": ["city-tlv"],
        "minPrice": 0,
        "propertyTypes": ["APARTMENT"],
    }

    response = client.put("/notifications/preferences", json={"filters": None}, headers=headers)
    assert response.json()["filters"] is None
    assert response.json()["notifyNewMatches"] is True


def test_preferences_reject_invalid_filters(client: TestClient, make_user) -> None:
    make_user("user-1", notify=None)

    response = client.put(
        "/notifications/preferences",
        json={"filters": {"minPrice": 100, "maxPrice": 10}},
        headers=_auth("user-1"),
    )

    assert response.status_code == 422
