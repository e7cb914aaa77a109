"""Account-scoped stores in the Supabase database.

Expected tables::

    CREATE TABLE cycle_data (
        user_id          text PRIMARY KEY,
        age              integer NOT NULL,
        cycle_length     integer NOT NULL,
        last_period_date date    NOT NULL,
        period_duration  integer NOT NULL,
        is_regular       boolean NOT NULL,
        goal             text    NOT NULL DEFAULT 'track_period',
        symptoms         text[]  NOT NULL DEFAULT '{}',
        stress_level     text,
        activity_level   text,
        updated_at       timestamptz NOT NULL DEFAULT now()
    );

    CREATE TABLE period_logs (
        user_id    text NOT NULL,
        start_date date NOT NULL,
        end_date   date,
        notes      text,
        created_at timestamptz NOT NULL DEFAULT now(),
        PRIMARY KEY (user_id, start_date)
    );

    CREATE TABLE symptom_logs (
        user_id      text NOT NULL,
        log_date     date NOT NULL,
        symptoms     text[] NOT NULL DEFAULT '{}',
        mood         text,
        energy_level text,
        notes        text,
        updated_at   timestamptz NOT NULL DEFAULT now(),
        PRIMARY KEY (user_id, log_date)
    );

Every failure of the driver, the network or the pool surfaces as
``StorageUnavailableError`` so callers can fall back to device storage.
Rows that cannot be decoded surface as ``StorageError``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Callable, Iterator, TypeVar

import asyncpg

from ancure.cycle.base import CycleConfiguration, PeriodLog, SymptomLog
from ancure.services import supabase
from ancure.storage.base import (
    CycleConfigurationStore,
    CycleLogStore,
    from_record,
    period_log_from_record,
    symptom_log_from_record,
    to_record,
)
from ancure.storage.errors import (
    UNREADABLE_MESSAGE,
    StorageError,
    StorageUnavailableError,
    friendly_message,
)

logger = logging.getLogger("ancure.storage.cloud")

T = TypeVar("T")

_RECOVERABLE = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, RuntimeError)
_MALFORMED = (KeyError, TypeError, ValueError)

_UPSERT = """
    INSERT INTO cycle_data (
        user_id, age, cycle_length, last_period_date, period_duration,
        is_regular, goal, symptoms, stress_level, activity_level
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
    ON CONFLICT (user_id) DO UPDATE SET
        age = EXCLUDED.age,
        cycle_length = EXCLUDED.cycle_length,
        last_period_date = EXCLUDED.last_period_date,
        period_duration = EXCLUDED.period_duration,
        is_regular = EXCLUDED.is_regular,
        goal = EXCLUDED.goal,
        symptoms = EXCLUDED.symptoms,
        stress_level = EXCLUDED.stress_level,
        activity_level = EXCLUDED.activity_level,
        updated_at = NOW()
"""

_UPSERT_PERIOD = """
    INSERT INTO period_logs (user_id, start_date, end_date, notes)
    VALUES ($1, $2, $3, $4)
    ON CONFLICT (user_id, start_date) DO UPDATE SET
        end_date = EXCLUDED.end_date,
        notes = EXCLUDED.notes
    RETURNING *
"""

_UPSERT_SYMPTOMS = """
    INSERT INTO symptom_logs (user_id, log_date, symptoms, mood, energy_level, notes)
    VALUES ($1, $2, $3, $4, $5, $6)
    ON CONFLICT (user_id, log_date) DO UPDATE SET
        symptoms = EXCLUDED.symptoms,
        mood = EXCLUDED.mood,
        energy_level = EXCLUDED.energy_level,
        notes = EXCLUDED.notes,
        updated_at = NOW()
    RETURNING *
"""


@contextmanager
def _reported(operation: str, user_id: str) -> Iterator[None]:
    try:
        yield
    except _RECOVERABLE as exc:
        logger.warning("Cloud %s failed for user %s: %s", operation, user_id, exc)
        raise StorageUnavailableError(
            f"{operation} failed: {exc}",
            user_message=friendly_message(exc),
        ) from exc


def _decode(decoder: Callable[[Any], T], row: Any, table: str, user_id: str) -> T:
    try:
        return decoder(row)
    except _MALFORMED as exc:
        logger.error("Unreadable %s row for user %s: %s", table, user_id, exc)
        raise StorageError(
            f"{table} row could not be decoded: {exc}",
            user_message=UNREADABLE_MESSAGE,
        ) from exc


class CloudCycleStore(CycleConfigurationStore):
    name = "cloud"

    async def save(self, key: str, configuration: CycleConfiguration) -> None:
        r = to_record(configuration)
        with _reported("cycle_data save", key):
            await supabase.execute(
                _UPSERT,
                key,
                r["age"],
                r["cycle_length"],
                r["last_period_date"],
                r["period_duration"],
                r["is_regular"],
                r["goal"],
                r["symptoms"],
                r["stress_level"],
                r["activity_level"],
                user_id=key,
            )

    async def load(self, key: str) -> CycleConfiguration | None:
        with _reported("cycle_data load", key):
            row = await supabase.fetchrow(
                "SELECT * FROM cycle_data WHERE user_id = $1", key, user_id=key
            )
        if row is None:
            return None
        return _decode(from_record, row, "cycle_data", key)

    async def delete(self, key: str) -> bool:
        with _reported("cycle_data delete", key):
            status = await supabase.execute(
                "DELETE FROM cycle_data WHERE user_id = $1", key, user_id=key
            )
        return status != "DELETE 0"


class CloudCycleLogStore(CycleLogStore):
    """Period and symptom logs in ``period_logs`` / ``symptom_logs``."""

    name = "cloud"

    async def log_period(self, key: str, log: PeriodLog) -> PeriodLog:
        with _reported("period_logs save", key):
            row = await supabase.fetchrow(
                _UPSERT_PERIOD, key, log.start_date, log.end_date, log.notes, user_id=key
            )
        return _decode(period_log_from_record, row, "period_logs", key)

    async def period_logs(self, key: str, limit: int = 12) -> list[PeriodLog]:
        with _reported("period_logs load", key):
            rows = await supabase.fetch(
                "SELECT * FROM period_logs WHERE user_id = $1 "
                "ORDER BY start_date DESC LIMIT $2",
                key, limit,
                user_id=key,
            )
        return [_decode(period_log_from_record, r, "period_logs", key) for r in rows]

    async def delete_period_log(self, key: str, start_date: date) -> bool:
        with _reported("period_logs delete", key):
            status = await supabase.execute(
                "DELETE FROM period_logs WHERE user_id = $1 AND start_date = $2",
                key, start_date,
                user_id=key,
            )
        return status != "DELETE 0"

    async def log_symptoms(self, key: str, log: SymptomLog) -> SymptomLog:
        with _reported("symptom_logs save", key):
            row = await supabase.fetchrow(
                _UPSERT_SYMPTOMS,
                key,
                log.log_date,
                sorted(log.symptoms),
                log.mood.value if log.mood else None,
                log.energy_level.value if log.energy_level else None,
                log.notes,
                user_id=key,
            )
        return _decode(symptom_log_from_record, row, "symptom_logs", key)

    async def symptom_log(self, key: str, log_date: date) -> SymptomLog | None:
        with _reported("symptom_logs load", key):
            row = await supabase.fetchrow(
                "SELECT * FROM symptom_logs WHERE user_id = $1 AND log_date = $2",
                key, log_date,
                user_id=key,
            )
        if row is None:
            return None
        return _decode(symptom_log_from_record, row, "symptom_logs", key)

    async def symptom_logs(self, key: str, limit: int = 30) -> list[SymptomLog]:
        with _reported("symptom_logs load", key):
            rows = await supabase.fetch(
                "SELECT * FROM symptom_logs WHERE user_id = $1 "
                "ORDER BY log_date DESC LIMIT $2",
                key, limit,
                user_id=key,
            )
        return [_decode(symptom_log_from_record, r, "symptom_logs", key) for r in rows]
