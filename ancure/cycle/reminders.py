"""Turn predicted dates into reminder entries.

This module only builds lists.  Asking for notification permission,
persisting the schedule and delivering notifications are the job of
whatever sink consumes these entries; nothing here assumes delivery
succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from ancure.cycle.base import CycleGoal, CycleInsights, ReminderEntry, ReminderKind
from ancure.cycle.config_loader import PredictorConfig, get_predictor_config
from ancure.cycle.predictor import as_day

logger = logging.getLogger("ancure.cycle.reminders")

PERIOD_MESSAGE = "Your period is expected tomorrow. Stay prepared! 🌸"
FERTILE_START_MESSAGE = "Your fertile window starts today! ✨"
FERTILE_WARNING_MESSAGE = "Your fertile window is approaching in {days} days. Take precautions. 💕"


def reminder_id(kind: ReminderKind, fire_date: date) -> str:
    return f"{kind.value}-{fire_date.isoformat()}"


def _entry(kind: ReminderKind, fire_date: date, message: str) -> ReminderEntry:
    return ReminderEntry(
        id=reminder_id(kind, fire_date),
        kind=kind,
        fire_date=fire_date,
        message=message,
    )


def derive_reminders(
    next_period_start: date,
    fertile_window_start: date,
    goal: CycleGoal | None,
    now: date | datetime | None = None,
    config: PredictorConfig | None = None,
) -> list[ReminderEntry]:
    """Build the reminders still ahead of ``now``.

    - A period reminder the day before ``next_period_start``.
    - ``try_to_conceive``: a fertile reminder on ``fertile_window_start``.
    - ``avoid_pregnancy``: a warning two days before ``fertile_window_start``.

    Reminders whose fire date is today or earlier are omitted.
    """
    rc = (config or get_predictor_config()).reminders
    today = as_day(now)
    entries: list[ReminderEntry] = []

    period_date = next_period_start - timedelta(days=rc.period_lead_days)
    if period_date > today:
        entries.append(_entry(ReminderKind.period, period_date, PERIOD_MESSAGE))

    if goal == CycleGoal.try_to_conceive and fertile_window_start > today:
        entries.append(
            _entry(ReminderKind.fertile, fertile_window_start, FERTILE_START_MESSAGE)
        )

    if goal == CycleGoal.avoid_pregnancy:
        warning_date = fertile_window_start - timedelta(days=rc.avoid_pregnancy_lead_days)
        if warning_date > today:
            entries.append(
                _entry(
                    ReminderKind.fertile,
                    warning_date,
                    FERTILE_WARNING_MESSAGE.format(days=rc.avoid_pregnancy_lead_days),
                )
            )

    return entries


def reminders_for(
    insights: CycleInsights,
    goal: CycleGoal | None,
    now: date | datetime | None = None,
    config: PredictorConfig | None = None,
) -> list[ReminderEntry]:
    """``derive_reminders`` fed from a CycleInsights."""
    return derive_reminders(
        insights.next_period_start,
        insights.fertile_window_start,
        goal,
        now,
        config,
    )


def merge_reminders(
    existing: Iterable[ReminderEntry],
    new: Iterable[ReminderEntry],
) -> list[ReminderEntry]:
    """Union two schedules by reminder id, preferring entries from ``new``.

    Returns the merged schedule ordered by fire date.
    """
    merged = {entry.id: entry for entry in existing}
    merged.update((entry.id, entry) for entry in new)
    return sorted(merged.values(), key=lambda e: (e.fire_date, e.id))


# ---------------------------------------------------------------------------
# Due-reminder selection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NotificationPreferences:
    """Which reminder kinds the user wants delivered."""

    enabled: bool = False
    period_reminder: bool = True
    fertile_reminder: bool = True

    def wants(self, kind: ReminderKind) -> bool:
        if kind == ReminderKind.period:
            return self.period_reminder
        return self.fertile_reminder


def collect_due(
    scheduled: Iterable[ReminderEntry],
    preferences: NotificationPreferences,
    now: date | datetime | None = None,
) -> tuple[list[ReminderEntry], list[ReminderEntry]]:
    """Split a schedule into reminders to deliver now and those to keep.

    A reminder is due on its fire date.  Due reminders of a kind the user
    switched off are dropped without being delivered.  When notifications
    are disabled entirely nothing is due and the schedule is returned as is.

    Returns:
        ``(to_deliver, remaining)``.
    """
    entries = list(scheduled)
    if not preferences.enabled:
        return [], entries

    today = as_day(now)
    due = [e for e in entries if e.fire_date == today]
    remaining = [e for e in entries if e.fire_date != today]
    deliver = [e for e in due if preferences.wants(e.kind)]
    if len(deliver) < len(due):
        logger.debug("Dropped %d due reminder(s) of disabled kinds", len(due) - len(deliver))
    return deliver, remaining
