"""Tests for reminder derivation and due-reminder selection."""

from __future__ import annotations

from datetime import date

from ancure.cycle.base import CycleGoal, ReminderEntry, ReminderKind
from ancure.cycle.config_loader import PredictorConfig
from ancure.cycle.predictor import CyclePredictor
from ancure.cycle.reminders import (
    NotificationPreferences,
    collect_due,
    derive_reminders,
    merge_reminders,
    reminder_id,
    reminders_for,
)
from ancure.cycle.tests.conftest import TODAY, make_configuration

NEXT_PERIOD = date(2024, 1, 29)
FERTILE_START = date(2024, 1, 20)


def entry(kind: ReminderKind, fire_date: date, message: str = "m") -> ReminderEntry:
    return ReminderEntry(id=reminder_id(kind, fire_date), kind=kind, fire_date=fire_date, message=message)


class TestDeriveReminders:
    def test_period_reminder_day_before(self, predictor_config: PredictorConfig) -> None:
        reminders = derive_reminders(
            NEXT_PERIOD, FERTILE_START, CycleGoal.track_period, TODAY, predictor_config
        )
        assert len(reminders) == 1
        (period,) = reminders
        assert period.kind == ReminderKind.period
        assert period.fire_date == date(2024, 1, 28)
        assert period.id == "period-2024-01-28"
        assert "tomorrow" in period.message

    def test_try_to_conceive_adds_fertile_start(self, predictor_config: PredictorConfig) -> None:
        reminders = derive_reminders(
            NEXT_PERIOD, FERTILE_START, CycleGoal.try_to_conceive, TODAY, predictor_config
        )
        fertile = [r for r in reminders if r.kind == ReminderKind.fertile]
        assert [r.fire_date for r in fertile] == [FERTILE_START]
        assert fertile[0].id == "fertile-2024-01-20"

    def test_avoid_pregnancy_warns_two_days_early(self, predictor_config: PredictorConfig) -> None:
        reminders = derive_reminders(
            NEXT_PERIOD, FERTILE_START, CycleGoal.avoid_pregnancy, TODAY, predictor_config
        )
        fertile = [r for r in reminders if r.kind == ReminderKind.fertile]
        assert [r.fire_date for r in fertile] == [date(2024, 1, 18)]
        assert "2 days" in fertile[0].message

    def test_other_goals_get_no_fertile_reminder(self, predictor_config: PredictorConfig) -> None:
        for goal in (CycleGoal.track_period, CycleGoal.pcos_management, None):
            reminders = derive_reminders(NEXT_PERIOD, FERTILE_START, goal, TODAY, predictor_config)
            assert all(r.kind == ReminderKind.period for r in reminders)

    def test_past_and_today_reminders_omitted(self, predictor_config: PredictorConfig) -> None:
        # Period reminder would fire today; fertile start is already past
        reminders = derive_reminders(
            date(2024, 1, 11), date(2024, 1, 5), CycleGoal.try_to_conceive, TODAY, predictor_config
        )
        assert reminders == []

    def test_warning_omitted_when_too_close(self, predictor_config: PredictorConfig) -> None:
        # Fertile window starts in 2 days → warning would fire today
        reminders = derive_reminders(
            NEXT_PERIOD, date(2024, 1, 12), CycleGoal.avoid_pregnancy, TODAY, predictor_config
        )
        assert [r.kind for r in reminders] == [ReminderKind.period]

    def test_recomputation_yields_same_ids(self, predictor_config: PredictorConfig) -> None:
        first = derive_reminders(
            NEXT_PERIOD, FERTILE_START, CycleGoal.try_to_conceive, TODAY, predictor_config
        )
        second = derive_reminders(
            NEXT_PERIOD, FERTILE_START, CycleGoal.try_to_conceive, date(2024, 1, 12), predictor_config
        )
        assert [r.id for r in first] == [r.id for r in second]

    def test_reminders_for_insights(self, predictor: CyclePredictor) -> None:
        configuration = make_configuration(goal=CycleGoal.try_to_conceive)
        insights = predictor.calculate_insights(configuration, date(2024, 1, 2))
        reminders = reminders_for(insights, configuration.goal, date(2024, 1, 2), predictor.config)
        assert {r.id for r in reminders} == {"period-2024-01-28", "fertile-2024-01-10"}


class TestMergeReminders:
    def test_no_duplicates_after_recompute(self) -> None:
        existing = [entry(ReminderKind.period, date(2024, 1, 28), "old")]
        new = [
            entry(ReminderKind.period, date(2024, 1, 28), "new"),
            entry(ReminderKind.fertile, date(2024, 1, 20)),
        ]
        merged = merge_reminders(existing, new)
        assert [r.id for r in merged] == ["fertile-2024-01-20", "period-2024-01-28"]
        assert merged[1].message == "new"


class TestCollectDue:
    def test_due_today_is_delivered_and_removed(self) -> None:
        today_entry = entry(ReminderKind.period, TODAY)
        later = entry(ReminderKind.fertile, date(2024, 1, 20))
        due, remaining = collect_due(
            [today_entry, later], NotificationPreferences(enabled=True), TODAY
        )
        assert due == [today_entry]
        assert remaining == [later]

    def test_disabled_notifications_leave_schedule_alone(self) -> None:
        scheduled = [entry(ReminderKind.period, TODAY)]
        due, remaining = collect_due(scheduled, NotificationPreferences(enabled=False), TODAY)
        assert due == []
        assert remaining == scheduled

    def test_disabled_kind_is_dropped_not_delivered(self) -> None:
        fertile_today = entry(ReminderKind.fertile, TODAY)
        prefs = NotificationPreferences(enabled=True, fertile_reminder=False)
        due, remaining = collect_due([fertile_today], prefs, TODAY)
        assert due == []
        assert remaining == []

    def test_future_reminders_not_due(self) -> None:
        scheduled = [entry(ReminderKind.period, date(2024, 1, 11))]
        due, remaining = collect_due(scheduled, NotificationPreferences(enabled=True), TODAY)
        assert due == []
        assert remaining == scheduled
