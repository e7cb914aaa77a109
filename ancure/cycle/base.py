"""Canonical domain types for cycle prediction.

``CycleConfiguration`` is what a user tells us about their cycle;
``CycleInsights`` is what the predictor derives from it.  Both are frozen
dataclasses: insights are recomputed on demand and never patched in place.
The API layer converts to and from these via the Pydantic models in
``ancure.models.cycle``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class CycleGoal(str, Enum):
    track_period = "track_period"
    try_to_conceive = "try_to_conceive"
    avoid_pregnancy = "avoid_pregnancy"
    pcos_management = "pcos_management"


class Level(str, Enum):
    low = "low"
    moderate = "moderate"
    high = "high"


class CyclePhase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulation = "ovulation"
    luteal = "luteal"


class Confidence(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class ReminderKind(str, Enum):
    period = "period"
    fertile = "fertile"


class InvalidCycleConfigurationError(ValueError):
    """Raised when a configuration cannot produce a meaningful prediction."""


@dataclass(frozen=True)
class CycleConfiguration:
    """User-supplied cycle parameters.

    Attributes:
        age:                  Age in years.  Range-checked by the API layer.
        cycle_length_days:    Days between the starts of consecutive periods.
        last_period_start:    First day of the most recent known period.
        period_duration_days: How many days bleeding lasts.
        is_regular:           True if cycle length varies by 7 days or less.
        goal:                 Tracking goal.  Affects reminders and guidance,
                              never the date math.
        symptoms:             Free-form symptom tags (e.g. ``"acne"``).
        stress_level:         Self-reported stress, if given.
        activity_level:       Self-reported activity, if given.
    """

    age: int
    cycle_length_days: int
    last_period_start: date
    period_duration_days: int
    is_regular: bool
    goal: CycleGoal = CycleGoal.track_period
    symptoms: frozenset[str] = field(default_factory=frozenset)
    stress_level: Level | None = None
    activity_level: Level | None = None


@dataclass(frozen=True)
class CycleInsights:
    """Predictions for the cycle in progress, relative to a reference day.

    Attributes:
        next_period_start:      First predicted day of the next period (always
                                after the reference day).
        next_period_end:        ``next_period_start + period_duration_days``.
        ovulation_date:         Estimated ovulation (fixed luteal length before
                                the next period).
        fertile_window_start:   First day of the estimated fertile window.
        fertile_window_end:     Last day of the estimated fertile window.
        current_cycle_start:    First day of the cycle in progress.
        current_cycle_day:      1-indexed day within the current cycle; day 1
                                is the day a period starts.
        days_until_next_period: Whole days until ``next_period_start``.
        cycle_phase:            Phase for ``current_cycle_day``.
        confidence:             Coarse trust label for these predictions.
    """

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


@dataclass(frozen=True)
class ReminderEntry:
    """A reminder to be handed to a notification sink.

    ``id`` is derived from kind and fire date so recomputing reminders for
    the same cycle yields the same identities.
    """

    id: str
    kind: ReminderKind
    fire_date: date
    message: str


# ---------------------------------------------------------------------------
# Logged history (signed-in users)
# ---------------------------------------------------------------------------


class Mood(str, Enum):
    happy = "happy"
    neutral = "neutral"
    sad = "sad"


class EnergyLevel(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


@dataclass(frozen=True)
class PeriodLog:
    """A period the user recorded as it happened.

    One log per start date; logging the same start again replaces it.
    """

    start_date: date
    end_date: date | None = None
    notes: str | None = None


@dataclass(frozen=True)
class SymptomLog:
    """How the user felt on one day.  One log per day."""

    log_date: date
    symptoms: frozenset[str] = field(default_factory=frozenset)
    mood: Mood | None = None
    energy_level: EnergyLevel | None = None
    notes: str | None = None
