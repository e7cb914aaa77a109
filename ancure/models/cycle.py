"""Pydantic request/response models for cycle data, insights and reminders.

Input bounds match the cycle entry form: age 12–60, cycle length 20–45
days, period duration 2–10 days.  The predictor itself only requires
positive lengths.
"""

from __future__ import annotations

from datetime import date

from pydantic import Field, field_validator

from ancure.cycle.base import (
    Confidence,
    CycleConfiguration,
    CycleGoal,
    CycleInsights,
    CyclePhase,
    Level,
    ReminderEntry,
    ReminderKind,
)
from ancure.cycle.reminders import NotificationPreferences
from ancure.models.base import AncureBase, Timestamped


# ---------- Cycle data ----------

class CycleDataIn(AncureBase):
    age: int = Field(ge=12, le=60)
    cycle_length: int = Field(default=28, ge=20, le=45)
    last_period_date: date
    period_duration: int = Field(default=5, ge=2, le=10)
    is_regular: bool = True
    goal: CycleGoal = CycleGoal.track_period
    symptoms: list[str] = Field(default_factory=list)
    stress_level: Level | None = None
    activity_level: Level | None = None

    @field_validator("symptoms")
    @classmethod
    def _dedupe_symptoms(cls, value: list[str]) -> list[str]:
        return sorted({s.strip() for s in value if s.strip()})

    def to_configuration(self) -> CycleConfiguration:
        return CycleConfiguration(
            age=self.age,
            cycle_length_days=self.cycle_length,
            last_period_start=self.last_period_date,
            period_duration_days=self.period_duration,
            is_regular=self.is_regular,
            goal=self.goal,
            symptoms=frozenset(self.symptoms),
            stress_level=self.stress_level,
            activity_level=self.activity_level,
        )

    @classmethod
    def from_configuration(cls, configuration: CycleConfiguration, **extra: object):
        return cls(
            age=configuration.age,
            cycle_length=configuration.cycle_length_days,
            last_period_date=configuration.last_period_start,
            period_duration=configuration.period_duration_days,
            is_regular=configuration.is_regular,
            goal=configuration.goal,
            symptoms=sorted(configuration.symptoms),
            stress_level=configuration.stress_level,
            activity_level=configuration.activity_level,
            **extra,
        )


class CycleDataRead(CycleDataIn):
    storage: str  # "local" | "cloud"


# ---------- Insights ----------

class PhaseInfoRead(AncureBase):
    name: str
    emoji: str
    message: str


class PcosIndicatorsRead(AncureBase):
    has_indicators: bool
    messages: list[str]


class InsightsRead(AncureBase, Timestamped):
    next_period_start: date
    next_period_end: date
    ovulation_date: date
    fertile_window_start: date
    fertile_window_end: date
    current_cycle_start: date
    current_cycle_day: int
    days_until_next_period: int
    cycle_phase: CyclePhase
    confidence: Confidence

    phase: PhaseInfoRead
    daily_insight: str
    pattern_insights: list[str]
    fertile_window_label: str
    pcos_indicators: PcosIndicatorsRead | None = None

    @classmethod
    def from_insights(cls, insights: CycleInsights, **extra: object) -> "InsightsRead":
        return cls(
            next_period_start=insights.next_period_start,
            next_period_end=insights.next_period_end,
            ovulation_date=insights.ovulation_date,
            fertile_window_start=insights.fertile_window_start,
            fertile_window_end=insights.fertile_window_end,
            current_cycle_start=insights.current_cycle_start,
            current_cycle_day=insights.current_cycle_day,
            days_until_next_period=insights.days_until_next_period,
            cycle_phase=insights.cycle_phase,
            confidence=insights.confidence,
            **extra,
        )


# ---------- Reminders ----------

class ReminderRead(AncureBase):
    id: str
    kind: ReminderKind
    fire_date: date
    message: str

    @classmethod
    def from_entry(cls, entry: ReminderEntry) -> "ReminderRead":
        return cls(id=entry.id, kind=entry.kind, fire_date=entry.fire_date, message=entry.message)

    def to_entry(self) -> ReminderEntry:
        return ReminderEntry(id=self.id, kind=self.kind, fire_date=self.fire_date, message=self.message)


class NotificationSettingsIn(AncureBase):
    enabled: bool = False
    period_reminder: bool = True
    fertile_reminder: bool = True
    scheduled: list[ReminderRead] = Field(default_factory=list)

    def preferences(self) -> NotificationPreferences:
        return NotificationPreferences(
            enabled=self.enabled,
            period_reminder=self.period_reminder,
            fertile_reminder=self.fertile_reminder,
        )


class DueRemindersRead(AncureBase):
    due: list[ReminderRead]
    remaining: list[ReminderRead]


class MigrationRead(AncureBase):
    migrated: bool
