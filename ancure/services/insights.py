"""Assemble the insights response: predictions plus guidance text."""

from __future__ import annotations

from datetime import date

from ancure.cycle import guidance
from ancure.cycle.base import CycleConfiguration, CycleGoal
from ancure.cycle.predictor import CyclePredictor
from ancure.models.cycle import InsightsRead, PcosIndicatorsRead, PhaseInfoRead


def build_insights(
    configuration: CycleConfiguration,
    predictor: CyclePredictor,
    as_of: date | None = None,
) -> InsightsRead:
    """Run the predictor and attach phase guidance.

    PCOS indicators are only included for the ``pcos_management`` goal.
    """
    insights = predictor.calculate_insights(configuration, as_of)
    info = guidance.phase_info(insights.cycle_phase)

    pcos = None
    if configuration.goal == CycleGoal.pcos_management:
        indicators = guidance.pcos_indicators(configuration, predictor.config)
        pcos = PcosIndicatorsRead(
            has_indicators=indicators.has_indicators,
            messages=indicators.messages,
        )

    return InsightsRead.from_insights(
        insights,
        phase=PhaseInfoRead(name=info.name, emoji=info.emoji, message=info.message),
        daily_insight=guidance.daily_insight(insights.cycle_phase, insights.current_cycle_day),
        pattern_insights=guidance.pattern_insights(configuration, predictor.config),
        fertile_window_label=guidance.format_date_range(
            insights.fertile_window_start, insights.fertile_window_end
        ),
        pcos_indicators=pcos,
    )
