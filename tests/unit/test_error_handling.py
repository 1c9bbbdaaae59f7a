from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from qrmenu.api import dependencies
from qrmenu.api.main import app
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.domain.common.ids import UserId


class BrokenRestaurantRepository:
    def list_for_user(self, user_id):
        raise RuntimeError("connection reset by peer")


@pytest.fixture
def broken_listing():
    app.dependency_overrides[dependencies.require_auth] = lambda: AuthContext(
        user_id=UserId("usr_owner"), session_id="sid-1"
    )
    app.dependency_overrides[dependencies.get_restaurant_repository] = (
        lambda: BrokenRestaurantRepository()
    )
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def test_internal_error_envelope_carries_request_id(broken_listing) -> None:
    response = broken_listing.get("/api/restaurants", headers={"X-Request-Id": "rid-500"})

    assert response.status_code == 500
    body = response.json()
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert body["error"]["message"] == "an unexpected error occurred"
    assert "connection reset" not in response.text
    assert body["requestId"] == "rid-500"
    assert response.headers["x-request-id"] == "rid-500"


def test_internal_error_gets_generated_request_id(broken_listing) -> None:
    response = broken_listing.get("/api/restaurants")

    assert response.status_code == 500
    request_id = response.json()["requestId"]
    assert request_id
    assert response.headers["x-request-id"] == request_id
