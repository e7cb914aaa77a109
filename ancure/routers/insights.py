"""Stateless prediction endpoints — public, nothing is stored."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from ancure.cycle.base import InvalidCycleConfigurationError
from ancure.cycle.reminders import collect_due, reminders_for
from ancure.dependencies import Predictor
from ancure.models.cycle import (
    CycleDataIn,
    DueRemindersRead,
    InsightsRead,
    NotificationSettingsIn,
    ReminderRead,
)
from ancure.services.insights import build_insights

router = APIRouter(prefix="/insights", tags=["insights"])


@router.post("", response_model=InsightsRead)
async def compute_insights(
    body: CycleDataIn,
    predictor: Predictor,
    as_of: date | None = Query(default=None, description="Reference day (defaults to today)"),
) -> Any:
    try:
        return build_insights(body.to_configuration(), predictor, as_of)
    except InvalidCycleConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post("/reminders", response_model=list[ReminderRead])
async def compute_reminders(
    body: CycleDataIn,
    predictor: Predictor,
    as_of: date | None = Query(default=None),
) -> Any:
    configuration = body.to_configuration()
    try:
        insights = predictor.calculate_insights(configuration, as_of)
    except InvalidCycleConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    entries = reminders_for(insights, configuration.goal, as_of, predictor.config)
    return [ReminderRead.from_entry(e) for e in entries]


@router.post("/reminders/due", response_model=DueRemindersRead)
async def due_reminders(
    body: NotificationSettingsIn,
    as_of: date | None = Query(default=None),
) -> Any:
    due, remaining = collect_due(
        (r.to_entry() for r in body.scheduled), body.preferences(), as_of
    )
    return DueRemindersRead(
        due=[ReminderRead.from_entry(e) for e in due],
        remaining=[ReminderRead.from_entry(e) for e in remaining],
    )
