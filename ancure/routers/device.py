"""Guest storage — cycle data kept per device, no account required."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from ancure.cycle.base import InvalidCycleConfigurationError
from ancure.dependencies import DeviceId, DeviceStore, Predictor
from ancure.models.cycle import CycleDataIn, CycleDataRead, InsightsRead
from ancure.services.insights import build_insights
from ancure.storage import StorageError

router = APIRouter(prefix="/device", tags=["device storage"])
logger = logging.getLogger("ancure.routers.device")


@router.get("/cycle-data", response_model=CycleDataRead)
async def get_device_data(device_id: DeviceId, store: DeviceStore) -> Any:
    configuration = await store.load(device_id)
    if configuration is None:
        raise HTTPException(status_code=404, detail="No cycle data on this device")
    return CycleDataRead.from_configuration(configuration, storage=store.name)


@router.put("/cycle-data", response_model=CycleDataRead)
async def put_device_data(device_id: DeviceId, store: DeviceStore, body: CycleDataIn) -> Any:
    configuration = body.to_configuration()
    try:
        await store.save(device_id, configuration)
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=exc.user_message) from exc
    return CycleDataRead.from_configuration(configuration, storage=store.name)


@router.delete("/cycle-data", status_code=204)
async def delete_device_data(device_id: DeviceId, store: DeviceStore) -> None:
    try:
        removed = await store.delete(device_id)
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=exc.user_message) from exc
    if not removed:
        raise HTTPException(status_code=404, detail="No cycle data on this device")


@router.get("/insights", response_model=InsightsRead)
async def get_device_insights(
    device_id: DeviceId,
    store: DeviceStore,
    predictor: Predictor,
    as_of: date | None = Query(default=None),
) -> Any:
    configuration = await store.load(device_id)
    if configuration is None:
        raise HTTPException(status_code=404, detail="No cycle data on this device")
    try:
        return build_insights(configuration, predictor, as_of)
    except InvalidCycleConfigurationError as exc:
        logger.warning("Stored device cycle data is unusable: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
