"""Period and symptom logs for signed-in users, and the history summary.

Logging a period also moves the account's cycle data forward: the newest
logged start becomes the last period date and, once at least two starts
are logged, the observed average becomes the cycle length.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from ancure.cycle.history import average_cycle_length, common_symptoms, update_from_history
from ancure.dependencies import CloudStore, CurrentUser, LogStore, storage_http_error
from ancure.models.history import (
    HistoryRead,
    PeriodLogIn,
    PeriodLogRead,
    SymptomLogIn,
    SymptomLogRead,
)
from ancure.storage import StorageError

router = APIRouter(tags=["logs"])
logger = logging.getLogger("ancure.routers.logs")

# Period logs considered when deriving cycle length
HISTORY_PERIODS = 12
HISTORY_SYMPTOM_DAYS = 30


# ---------- Period logs ----------

@router.post("/period-logs", response_model=PeriodLogRead, status_code=201)
async def log_period(
    user: CurrentUser, logs: LogStore, configs: CloudStore, body: PeriodLogIn
) -> Any:
    try:
        saved = await logs.log_period(user.user_id, body.to_log())
        configuration = await configs.load(user.user_id)
        if configuration is not None:
            recent = await logs.period_logs(user.user_id, limit=HISTORY_PERIODS)
            updated = update_from_history(configuration, [p.start_date for p in recent])
            if updated != configuration:
                await configs.save(user.user_id, updated)
                logger.info("Cycle data for user %s updated from logged periods", user.user_id)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    return PeriodLogRead.from_log(saved)


@router.get("/period-logs", response_model=list[PeriodLogRead])
async def list_period_logs(
    user: CurrentUser,
    logs: LogStore,
    limit: int = Query(default=HISTORY_PERIODS, ge=1, le=100),
) -> Any:
    try:
        entries = await logs.period_logs(user.user_id, limit=limit)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    return [PeriodLogRead.from_log(e) for e in entries]


@router.delete("/period-logs/{start_date}", status_code=204)
async def delete_period_log(start_date: date, user: CurrentUser, logs: LogStore) -> None:
    try:
        removed = await logs.delete_period_log(user.user_id, start_date)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    if not removed:
        raise HTTPException(status_code=404, detail="Period log not found")


# ---------- Symptom logs ----------

@router.post("/symptom-logs", response_model=SymptomLogRead, status_code=201)
async def log_symptoms(user: CurrentUser, logs: LogStore, body: SymptomLogIn) -> Any:
    try:
        saved = await logs.log_symptoms(user.user_id, body.to_log())
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    return SymptomLogRead.from_log(saved)


@router.get("/symptom-logs", response_model=list[SymptomLogRead])
async def list_symptom_logs(
    user: CurrentUser,
    logs: LogStore,
    limit: int = Query(default=HISTORY_SYMPTOM_DAYS, ge=1, le=365),
) -> Any:
    try:
        entries = await logs.symptom_logs(user.user_id, limit=limit)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    return [SymptomLogRead.from_log(e) for e in entries]


@router.get("/symptom-logs/{log_date}", response_model=SymptomLogRead)
async def get_symptom_log(log_date: date, user: CurrentUser, logs: LogStore) -> Any:
    try:
        entry = await logs.symptom_log(user.user_id, log_date)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    if entry is None:
        raise HTTPException(status_code=404, detail="No symptoms logged for this day")
    return SymptomLogRead.from_log(entry)


# ---------- Summary ----------

@router.get("/history", response_model=HistoryRead)
async def get_history(user: CurrentUser, logs: LogStore) -> Any:
    """Recent logs with the observed average cycle length and top symptoms."""
    try:
        periods = await logs.period_logs(user.user_id, limit=HISTORY_PERIODS)
        symptoms = await logs.symptom_logs(user.user_id, limit=HISTORY_SYMPTOM_DAYS)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    return HistoryRead(
        period_logs=[PeriodLogRead.from_log(p) for p in periods],
        symptom_logs=[SymptomLogRead.from_log(s) for s in symptoms],
        average_cycle_length=average_cycle_length(p.start_date for p in periods),
        common_symptoms=common_symptoms(symptoms),
    )
