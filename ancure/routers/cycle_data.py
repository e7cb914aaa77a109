"""Account storage — cycle data synced to Supabase for signed-in users.

Every handler maps ``StorageError`` to ``503`` (``401`` when the session was
rejected) with a message the client can show directly.  The client is
expected to keep its device copy and retry later.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from ancure.cycle.base import InvalidCycleConfigurationError
from ancure.dependencies import (
    CloudStore,
    CurrentUser,
    DeviceId,
    DeviceStore,
    Predictor,
    storage_http_error,
)
from ancure.models.cycle import CycleDataIn, CycleDataRead, InsightsRead, MigrationRead
from ancure.services.insights import build_insights
from ancure.storage import StorageError, migrate_local_to_cloud

router = APIRouter(prefix="/cycle-data", tags=["cycle data"])
logger = logging.getLogger("ancure.routers.cycle_data")


@router.get("", response_model=CycleDataRead)
async def get_cycle_data(user: CurrentUser, store: CloudStore) -> Any:
    try:
        configuration = await store.load(user.user_id)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    if configuration is None:
        raise HTTPException(status_code=404, detail="No cycle data saved to this account")
    return CycleDataRead.from_configuration(configuration, storage=store.name)


@router.put("", response_model=CycleDataRead)
async def put_cycle_data(user: CurrentUser, store: CloudStore, body: CycleDataIn) -> Any:
    configuration = body.to_configuration()
    try:
        await store.save(user.user_id, configuration)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    logger.info("Saved cycle data for user %s", user.user_id)
    return CycleDataRead.from_configuration(configuration, storage=store.name)


@router.delete("", status_code=204)
async def delete_cycle_data(user: CurrentUser, store: CloudStore) -> None:
    try:
        removed = await store.delete(user.user_id)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    if not removed:
        raise HTTPException(status_code=404, detail="No cycle data saved to this account")


@router.get("/insights", response_model=InsightsRead)
async def get_cycle_insights(
    user: CurrentUser,
    store: CloudStore,
    predictor: Predictor,
    as_of: date | None = Query(default=None),
) -> Any:
    try:
        configuration = await store.load(user.user_id)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    if configuration is None:
        raise HTTPException(status_code=404, detail="No cycle data saved to this account")
    try:
        return build_insights(configuration, predictor, as_of)
    except InvalidCycleConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post("/migrate", response_model=MigrationRead)
async def migrate_device_data(
    user: CurrentUser,
    device_id: DeviceId,
    device_store: DeviceStore,
    cloud_store: CloudStore,
) -> Any:
    """Move this device's guest data into the signed-in account."""
    migrated = await migrate_local_to_cloud(device_store, cloud_store, device_id, user.user_id)
    return MigrationRead(migrated=migrated)
