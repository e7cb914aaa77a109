"""Store interface for cycle configurations, plus the record codec.

Two configuration stores exist:

- ``LocalCycleStore``  — keyed by device id, files on local disk, no network.
- ``CloudCycleStore``  — keyed by account (user) id, Supabase Postgres.

Both speak the same flat record layout as the ``cycle_data`` table so a
configuration can move between them unchanged.  Period and symptom logs
exist only for accounts (``CycleLogStore``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from ancure.cycle.base import (
    CycleConfiguration,
    CycleGoal,
    EnergyLevel,
    Level,
    Mood,
    PeriodLog,
    SymptomLog,
)


class CycleConfigurationStore(ABC):
    """Persist one CycleConfiguration per key.  Writes are last-write-wins."""

    #: Short name used in logs, e.g. "local" or "cloud".
    name: str = "abstract"

    @abstractmethod
    async def save(self, key: str, configuration: CycleConfiguration) -> None:
        """Create or replace the configuration stored under ``key``.

        Raises:
            StorageError: If the write did not happen.
        """

    @abstractmethod
    async def load(self, key: str) -> CycleConfiguration | None:
        """Return the configuration under ``key``, or None if there is none."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove the configuration under ``key``.  Returns False if absent."""


# ---------------------------------------------------------------------------
# Record codec
# ---------------------------------------------------------------------------


def to_record(configuration: CycleConfiguration) -> dict[str, Any]:
    """Flatten a configuration to ``cycle_data`` column names.

    Dates stay ``date`` objects; callers that write JSON convert them.
    """
    return {
        "age": configuration.age,
        "cycle_length": configuration.cycle_length_days,
        "last_period_date": configuration.last_period_start,
        "period_duration": configuration.period_duration_days,
        "is_regular": configuration.is_regular,
        "goal": configuration.goal.value,
        "symptoms": sorted(configuration.symptoms),
        "stress_level": configuration.stress_level.value if configuration.stress_level else None,
        "activity_level": (
            configuration.activity_level.value if configuration.activity_level else None
        ),
    }


def from_record(record: Any) -> CycleConfiguration:
    """Build a configuration from a ``cycle_data`` row or a decoded JSON dict.

    Accepts ISO strings for ``last_period_date``.  Missing goal falls back to
    ``track_period``.

    Raises:
        KeyError, ValueError: If the record is incomplete or malformed.
    """
    last_period = record["last_period_date"]
    if isinstance(last_period, str):
        last_period = date.fromisoformat(last_period)
    stress = record.get("stress_level")
    activity = record.get("activity_level")
    return CycleConfiguration(
        age=int(record["age"]),
        cycle_length_days=int(record["cycle_length"]),
        last_period_start=last_period,
        period_duration_days=int(record["period_duration"]),
        is_regular=bool(record["is_regular"]),
        goal=CycleGoal(record.get("goal") or CycleGoal.track_period.value),
        symptoms=frozenset(record.get("symptoms") or ()),
        stress_level=Level(stress) if stress else None,
        activity_level=Level(activity) if activity else None,
    )


# ---------------------------------------------------------------------------
# Logged history
# ---------------------------------------------------------------------------


class CycleLogStore(ABC):
    """Per-account period and symptom logs."""

    name: str = "abstract"

    @abstractmethod
    async def log_period(self, key: str, log: PeriodLog) -> PeriodLog:
        """Record a period, replacing any log with the same start date."""

    @abstractmethod
    async def period_logs(self, key: str, limit: int = 12) -> list[PeriodLog]:
        """Most recent period logs first."""

    @abstractmethod
    async def delete_period_log(self, key: str, start_date: date) -> bool:
        """Remove the period log starting on ``start_date``.  Returns False if absent."""

    @abstractmethod
    async def log_symptoms(self, key: str, log: SymptomLog) -> SymptomLog:
        """Record the day's symptoms, replacing any log for the same day."""

    @abstractmethod
    async def symptom_log(self, key: str, log_date: date) -> SymptomLog | None:
        """The symptom log for ``log_date``, or None."""

    @abstractmethod
    async def symptom_logs(self, key: str, limit: int = 30) -> list[SymptomLog]:
        """Most recent symptom logs first."""


def _as_date(value: Any) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


def period_log_from_record(record: Any) -> PeriodLog:
    """Build a PeriodLog from a ``period_logs`` row.

    Raises:
        KeyError, ValueError: If the row is incomplete or malformed.
    """
    return PeriodLog(
        start_date=_as_date(record["start_date"]),
        end_date=_as_date(record.get("end_date")),
        notes=record.get("notes"),
    )


def symptom_log_from_record(record: Any) -> SymptomLog:
    """Build a SymptomLog from a ``symptom_logs`` row.

    Raises:
        KeyError, ValueError: If the row is incomplete or malformed.
    """
    mood = record.get("mood")
    energy = record.get("energy_level")
    return SymptomLog(
        log_date=_as_date(record["log_date"]),
        symptoms=frozenset(record.get("symptoms") or ()),
        mood=Mood(mood) if mood else None,
        energy_level=EnergyLevel(energy) if energy else None,
        notes=record.get("notes"),
    )
