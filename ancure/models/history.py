"""Pydantic models for period logs, symptom logs and the history summary."""

from __future__ import annotations

from datetime import date

from pydantic import Field, field_validator, model_validator

from ancure.cycle.base import EnergyLevel, Mood, PeriodLog, SymptomLog
from ancure.models.base import AncureBase


# ---------- Period logs ----------

class PeriodLogIn(AncureBase):
    start_date: date
    end_date: date | None = None
    notes: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _end_after_start(self) -> "PeriodLogIn":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def to_log(self) -> PeriodLog:
        return PeriodLog(start_date=self.start_date, end_date=self.end_date, notes=self.notes)


class PeriodLogRead(PeriodLogIn):
    @classmethod
    def from_log(cls, log: PeriodLog) -> "PeriodLogRead":
        return cls(start_date=log.start_date, end_date=log.end_date, notes=log.notes)


# ---------- Symptom logs ----------

class SymptomLogIn(AncureBase):
    log_date: date
    symptoms: list[str] = Field(default_factory=list)
    mood: Mood | None = None
    energy_level: EnergyLevel | None = None
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("symptoms")
    @classmethod
    def _dedupe_symptoms(cls, value: list[str]) -> list[str]:
        return sorted({s.strip() for s in value if s.strip()})

    def to_log(self) -> SymptomLog:
        return SymptomLog(
            log_date=self.log_date,
            symptoms=frozenset(self.symptoms),
            mood=self.mood,
            energy_level=self.energy_level,
            notes=self.notes or None,
        )


class SymptomLogRead(SymptomLogIn):
    @classmethod
    def from_log(cls, log: SymptomLog) -> "SymptomLogRead":
        return cls(
            log_date=log.log_date,
            symptoms=sorted(log.symptoms),
            mood=log.mood,
            energy_level=log.energy_level,
            notes=log.notes,
        )


# ---------- Summary ----------

class HistoryRead(AncureBase):
    period_logs: list[PeriodLogRead]
    symptom_logs: list[SymptomLogRead]
    average_cycle_length: int | None = None
    common_symptoms: list[str]
