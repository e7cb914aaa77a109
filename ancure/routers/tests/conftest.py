"""Fixtures for API tests: the real app with storage swapped for test doubles."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ancure.dependencies import (
    AuthContext,
    get_cloud_store,
    get_current_user,
    get_device_store,
    get_log_store,
)
from ancure.main import create_app
from ancure.routers import cycle_data, logs
from ancure.storage.local import LocalCycleStore
from ancure.storage.tests.conftest import MemoryLogStore, MemoryStore

DEVICE_HEADERS = {"X-Device-Id": "device-6f1c2a9e"}
TEST_USER = AuthContext(user_id="user_2xAbCdEf", email="test@example.com")

CYCLE_BODY = {
    "age": 29,
    "cycle_length": 28,
    "last_period_date": "2024-01-01",
    "period_duration": 5,
    "is_regular": True,
}


@pytest.fixture
def device_store(tmp_path: Path) -> LocalCycleStore:
    return LocalCycleStore(tmp_path / "devices")


@pytest.fixture
def cloud_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def log_store() -> MemoryLogStore:
    return MemoryLogStore()


@pytest.fixture
def client(device_store: LocalCycleStore) -> Iterator[TestClient]:
    """The full application, including middleware, with device storage in tmp_path."""
    app = create_app()
    app.dependency_overrides[get_device_store] = lambda: device_store
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def account_client(
    device_store: LocalCycleStore, cloud_store: MemoryStore, log_store: MemoryLogStore
) -> TestClient:
    """Just the account routers, already authenticated as TEST_USER."""
    app = FastAPI()
    app.include_router(cycle_data.router, prefix="/api/v1")
    app.include_router(logs.router, prefix="/api/v1")
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    app.dependency_overrides[get_device_store] = lambda: device_store
    app.dependency_overrides[get_cloud_store] = lambda: cloud_store
    app.dependency_overrides[get_log_store] = lambda: log_store
    return TestClient(app)
