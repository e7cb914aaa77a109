"""Calendar-based cycle prediction.

Given a ``CycleConfiguration`` and a reference day, derive the next period,
the ovulation estimate, the fertile window, the position within the current
cycle and a confidence label.

The model is calendar arithmetic: a fixed luteal phase before each predicted
period, fixed fertile-window offsets around ovulation (widened for irregular
cycles) and day-number thresholds for phases.  All constants come from
``cycle_config.yaml``.

Usage::

    predictor = CyclePredictor()
    insights = predictor.calculate_insights(configuration, now=date(2024, 1, 10))
    insights.next_period_start   # date(2024, 1, 29)
    insights.cycle_phase         # CyclePhase.follicular
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from ancure.cycle.base import (
    Confidence,
    CycleConfiguration,
    CycleInsights,
    CyclePhase,
    InvalidCycleConfigurationError,
)
from ancure.cycle.config_loader import PredictorConfig, get_predictor_config

logger = logging.getLogger("ancure.cycle.predictor")


def as_day(now: date | datetime | None) -> date:
    """Normalize a reference time to a calendar day (today if omitted)."""
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


class CyclePredictor:
    """Stateless predictor bound to an immutable ``PredictorConfig``.

    Instances hold no per-call state and may be shared across threads and
    requests.
    """

    def __init__(self, config: PredictorConfig | None = None) -> None:
        self._config = config or get_predictor_config()

    @property
    def config(self) -> PredictorConfig:
        return self._config

    def calculate_insights(
        self,
        configuration: CycleConfiguration,
        now: date | datetime | None = None,
    ) -> CycleInsights:
        """Predict the upcoming cycle relative to ``now``.

        Args:
            configuration: The user's cycle parameters.
            now:           Reference day or time; only its calendar date is
                           used.  Defaults to today.

        Returns:
            A fresh CycleInsights.

        Raises:
            InvalidCycleConfigurationError: If a length is not positive or the
                anchor is not a date.
        """
        _validate(configuration)
        cfg = self._config
        today = as_day(now)
        anchor = as_day(configuration.last_period_start)
        cycle = timedelta(days=configuration.cycle_length_days)

        # A period due today has already started, so the next one is strictly
        # after today.  Skip whole cycles at once instead of stepping.
        next_start = anchor + cycle
        if next_start <= today:
            gap = (today - next_start).days
            next_start += cycle * (gap // configuration.cycle_length_days + 1)

        ovulation = next_start - timedelta(days=cfg.luteal_phase_days)

        fw = cfg.fertile_window
        before, after = fw.days_before_ovulation, fw.days_after_ovulation
        if not configuration.is_regular:
            before += fw.irregular_widening_days
            after += fw.irregular_widening_days

        cycle_start = next_start - cycle
        # An anchor in the future puts cycle_start after today
        cycle_day = max(1, (today - cycle_start).days + 1)

        return CycleInsights(
            next_period_start=next_start,
            next_period_end=next_start + timedelta(days=configuration.period_duration_days),
            ovulation_date=ovulation,
            fertile_window_start=ovulation - timedelta(days=before),
            fertile_window_end=ovulation + timedelta(days=after),
            current_cycle_start=cycle_start,
            current_cycle_day=cycle_day,
            days_until_next_period=(next_start - today).days,
            cycle_phase=self.phase_for_day(cycle_day, configuration),
            confidence=self.confidence_for(configuration),
        )

    def phase_for_day(self, cycle_day: int, configuration: CycleConfiguration) -> CyclePhase:
        """Return the phase for a 1-indexed cycle day.

        Menstruation always takes precedence for the first
        ``period_duration_days`` days.
        """
        if cycle_day <= configuration.period_duration_days:
            return CyclePhase.menstrual

        phases = self._config.phases
        if phases.boundaries == "scaled":
            ovulation_start = configuration.cycle_length_days - self._config.luteal_phase_days
            follicular_end = ovulation_start - 1
            ovulation_end = ovulation_start + phases.ovulation_phase_days - 1
        else:
            follicular_end = phases.follicular_end_day
            ovulation_end = phases.ovulation_end_day

        if cycle_day <= follicular_end:
            return CyclePhase.follicular
        if cycle_day <= ovulation_end:
            return CyclePhase.ovulation
        return CyclePhase.luteal

    def confidence_for(self, configuration: CycleConfiguration) -> Confidence:
        if not configuration.is_regular:
            return Confidence.low
        if not self._config.is_typical_length(configuration.cycle_length_days):
            return Confidence.medium
        return Confidence.high


def _validate(configuration: CycleConfiguration) -> None:
    problems: list[str] = []
    if configuration.cycle_length_days <= 0:
        problems.append(f"cycle_length_days must be positive, got {configuration.cycle_length_days}")
    if configuration.period_duration_days <= 0:
        problems.append(
            f"period_duration_days must be positive, got {configuration.period_duration_days}"
        )
    if not isinstance(configuration.last_period_start, date):
        problems.append(
            f"last_period_start must be a date, got {configuration.last_period_start!r}"
        )
    if problems:
        logger.debug("Rejected cycle configuration: %s", "; ".join(problems))
        raise InvalidCycleConfigurationError("; ".join(problems))


def calculate_insights(
    configuration: CycleConfiguration,
    now: date | datetime | None = None,
) -> CycleInsights:
    """Module-level shortcut using the global predictor config."""
    return CyclePredictor().calculate_insights(configuration, now)
