"""Shared fixtures for configuration store tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from ancure.cycle.base import CycleConfiguration, CycleGoal, Level, PeriodLog, SymptomLog
from ancure.storage.base import CycleConfigurationStore, CycleLogStore
from ancure.storage.errors import StorageUnavailableError
from ancure.storage.local import LocalCycleStore

DEVICE_ID = "device-6f1c2a9e"
USER_ID = "user_2xAbCdEf"


class MemoryStore(CycleConfigurationStore):
    """In-memory store; set ``fail`` to simulate an unreachable backend."""

    name = "memory"

    def __init__(self, fail: bool = False) -> None:
        self.data: dict[str, CycleConfiguration] = {}
        self.fail = fail

    def _check(self) -> None:
        if self.fail:
            raise StorageUnavailableError("backend down", user_message="Unavailable")

    async def save(self, key: str, configuration: CycleConfiguration) -> None:
        self._check()
        self.data[key] = configuration

    async def load(self, key: str) -> CycleConfiguration | None:
        self._check()
        return self.data.get(key)

    async def delete(self, key: str) -> bool:
        self._check()
        return self.data.pop(key, None) is not None


class MemoryLogStore(CycleLogStore):
    """In-memory period and symptom logs; set ``fail`` to simulate an outage."""

    name = "memory"

    def __init__(self, fail: bool = False) -> None:
        self.periods: dict[str, dict[date, PeriodLog]] = {}
        self.symptoms: dict[str, dict[date, SymptomLog]] = {}
        self.fail = fail

    def _check(self) -> None:
        if self.fail:
            raise StorageUnavailableError("backend down", user_message="Unavailable")

    async def log_period(self, key: str, log: PeriodLog) -> PeriodLog:
        self._check()
        self.periods.setdefault(key, {})[log.start_date] = log
        return log

    async def period_logs(self, key: str, limit: int = 12) -> list[PeriodLog]:
        self._check()
        logs = self.periods.get(key, {})
        return [logs[d] for d in sorted(logs, reverse=True)][:limit]

    async def delete_period_log(self, key: str, start_date: date) -> bool:
        self._check()
        return self.periods.get(key, {}).pop(start_date, None) is not None

    async def log_symptoms(self, key: str, log: SymptomLog) -> SymptomLog:
        self._check()
        self.symptoms.setdefault(key, {})[log.log_date] = log
        return log

    async def symptom_log(self, key: str, log_date: date) -> SymptomLog | None:
        self._check()
        return self.symptoms.get(key, {}).get(log_date)

    async def symptom_logs(self, key: str, limit: int = 30) -> list[SymptomLog]:
        self._check()
        logs = self.symptoms.get(key, {})
        return [logs[d] for d in sorted(logs, reverse=True)][:limit]


@pytest.fixture
def configuration() -> CycleConfiguration:
    return CycleConfiguration(
        age=31,
        cycle_length_days=30,
        last_period_start=date(2024, 3, 2),
        period_duration_days=4,
        is_regular=False,
        goal=CycleGoal.try_to_conceive,
        symptoms=frozenset({"bloating", "acne"}),
        stress_level=Level.moderate,
        activity_level=None,
    )


@pytest.fixture
def local_store(tmp_path: Path) -> LocalCycleStore:
    return LocalCycleStore(tmp_path / "devices")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def log_store() -> MemoryLogStore:
    return MemoryLogStore()
