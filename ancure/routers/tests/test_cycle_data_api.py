"""Tests for the signed-in account endpoints."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from ancure.dependencies import get_device_store
from ancure.models.cycle import CycleDataIn
from ancure.routers.tests.conftest import CYCLE_BODY, DEVICE_HEADERS, TEST_USER
from ancure.storage.errors import StorageUnavailableError
from ancure.storage.local import LocalCycleStore
from ancure.storage.tests.conftest import MemoryStore
from ancure.storage.tests.test_migration import UndeletableStore


def expired_session_error() -> StorageUnavailableError:
    error = StorageUnavailableError(
        "cycle_data load failed: JWT expired",
        user_message="Your session has expired. Please sign in again.",
    )
    error.__cause__ = Exception("JWT expired")
    return error


class TestAccountStorage:
    def test_put_get_delete(self, account_client: TestClient, cloud_store: MemoryStore) -> None:
        assert account_client.get("/api/v1/cycle-data").status_code == 404

        put = account_client.put("/api/v1/cycle-data", json=CYCLE_BODY | {"symptoms": ["acne", "acne "]})
        assert put.status_code == 200
        assert put.json()["storage"] == "memory"
        assert put.json()["symptoms"] == ["acne"]
        assert TEST_USER.user_id in cloud_store.data

        assert account_client.get("/api/v1/cycle-data").json()["cycle_length"] == 28
        assert account_client.delete("/api/v1/cycle-data").status_code == 204
        assert account_client.delete("/api/v1/cycle-data").status_code == 404

    def test_insights_from_saved_data(self, account_client: TestClient) -> None:
        account_client.put("/api/v1/cycle-data", json=CYCLE_BODY)
        resp = account_client.get("/api/v1/cycle-data/insights", params={"as_of": "2024-01-10"})
        assert resp.status_code == 200
        assert resp.json()["current_cycle_day"] == 10

    def test_backend_down_is_503_with_friendly_message(
        self, account_client: TestClient, cloud_store: MemoryStore
    ) -> None:
        cloud_store.fail = True
        resp = account_client.put("/api/v1/cycle-data", json=CYCLE_BODY)
        assert resp.status_code == 503
        assert resp.json()["detail"] == "Unavailable"

    def test_rejected_session_is_401(
        self, account_client: TestClient, cloud_store: MemoryStore
    ) -> None:
        cloud_store.load = AsyncMock(side_effect=expired_session_error())
        resp = account_client.get("/api/v1/cycle-data")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Your session has expired. Please sign in again."


class TestMigration:
    def test_migrates_device_data(
        self,
        account_client: TestClient,
        cloud_store: MemoryStore,
        device_store: LocalCycleStore,
    ) -> None:
        configuration = CycleDataIn(**CYCLE_BODY).to_configuration()
        asyncio.run(device_store.save(DEVICE_HEADERS["X-Device-Id"], configuration))

        resp = account_client.post("/api/v1/cycle-data/migrate", headers=DEVICE_HEADERS)
        assert resp.status_code == 200
        assert resp.json() == {"migrated": True}
        assert cloud_store.data[TEST_USER.user_id] == configuration
        assert not device_store.has_data(DEVICE_HEADERS["X-Device-Id"])

    def test_nothing_to_migrate(self, account_client: TestClient) -> None:
        resp = account_client.post("/api/v1/cycle-data/migrate", headers=DEVICE_HEADERS)
        assert resp.json() == {"migrated": False}

    def test_device_copy_that_cannot_be_cleared(
        self, account_client: TestClient, cloud_store: MemoryStore
    ) -> None:
        device = UndeletableStore()
        configuration = CycleDataIn(**CYCLE_BODY).to_configuration()
        device.data[DEVICE_HEADERS["X-Device-Id"]] = configuration
        account_client.app.dependency_overrides[get_device_store] = lambda: device

        resp = account_client.post("/api/v1/cycle-data/migrate", headers=DEVICE_HEADERS)
        assert resp.status_code == 200
        assert resp.json() == {"migrated": True}
        assert cloud_store.data[TEST_USER.user_id] == configuration
