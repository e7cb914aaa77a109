"""Tests for the auth allow-list and header middleware."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ancure.middleware.clerk_auth import is_public
from ancure.middleware.security import SECURITY_HEADERS


@pytest.mark.parametrize(
    "path",
    ["/health", "/docs", "/openapi.json", "/api/v1/insights", "/api/v1/insights/reminders", "/api/v1/device/cycle-data"],
)
def test_public_paths(path: str) -> None:
    assert is_public(path)


@pytest.mark.parametrize(
    "path",
    ["/api/v1/cycle-data", "/api/v1/cycle-data/migrate", "/api/v1/period-logs", "/api/v1/history", "/"],
)
def test_protected_paths(path: str) -> None:
    assert not is_public(path)


def test_malformed_bearer_rejected(client: TestClient) -> None:
    resp = client.get("/api/v1/cycle-data", headers={"Authorization": "Token abc"})
    assert resp.status_code == 401
    assert "Authorization" in resp.json()["detail"]


def test_security_headers_on_health(client: TestClient) -> None:
    resp = client.get("/health")
    for header, value in SECURITY_HEADERS.items():
        assert resp.headers[header] == value
    assert "Cache-Control" not in resp.headers
