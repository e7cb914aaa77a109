"""Supportive, non-diagnostic guidance text for a cycle.

Phase descriptions, a rotating daily insight, pattern observations and
educational PCOS indicators.  Everything here is presentation data derived
from a configuration or a phase; none of it feeds back into predictions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ancure.cycle.base import CycleConfiguration, CyclePhase, Level
from ancure.cycle.config_loader import PredictorConfig, get_predictor_config


@dataclass(frozen=True)
class PhaseInfo:
    name: str
    emoji: str
    message: str


@dataclass(frozen=True)
class PcosIndicators:
    """Educational signals only.  Never a diagnosis."""

    has_indicators: bool
    messages: list[str] = field(default_factory=list)


PHASE_INFO: dict[CyclePhase, PhaseInfo] = {
    CyclePhase.menstrual: PhaseInfo(
        name="Menstrual Phase",
        emoji="🌸",
        message=(
            "It's okay to rest and be gentle with yourself during this time. "
            "Your body is doing important work."
        ),
    ),
    CyclePhase.follicular: PhaseInfo(
        name="Follicular Phase",
        emoji="🌱",
        message=(
            "Energy often starts to rise during this phase. "
            "It's a great time for new beginnings and creativity."
        ),
    ),
    CyclePhase.ovulation: PhaseInfo(
        name="Ovulation Phase",
        emoji="✨",
        message=(
            "Many people feel their most energetic and social during ovulation. "
            "Embrace this vibrant energy!"
        ),
    ),
    CyclePhase.luteal: PhaseInfo(
        name="Luteal Phase",
        emoji="🍂",
        message=(
            "This phase invites introspection. Be kind to yourself as your body "
            "prepares for its next cycle."
        ),
    ),
}

DAILY_INSIGHTS: dict[CyclePhase, tuple[str, ...]] = {
    CyclePhase.menstrual: (
        "It's common to feel lower energy during your period. Be gentle with yourself today 🤍",
        "Warm drinks and rest can help you feel more comfortable during this phase.",
        "Your body is doing amazing work right now. Take time to nurture yourself.",
    ),
    CyclePhase.follicular: (
        "Rising estrogen often brings renewed energy. Today might be great for planning!",
        "Many find this phase ideal for starting new projects or habits.",
        "Your focus and creativity may be heightened during this time.",
    ),
    CyclePhase.ovulation: (
        "You might feel extra social and energetic today. Embrace the vibrancy!",
        "Communication often feels easier during ovulation. Great for important conversations.",
        "This is often a peak energy time. Use it for activities you love!",
    ),
    CyclePhase.luteal: (
        "Progesterone rises during this phase. Comfort foods and rest are perfectly okay.",
        "You might crave more quiet time. Listen to what your body needs.",
        "Self-care becomes especially important as your cycle prepares to renew.",
    ),
}


def phase_info(phase: CyclePhase) -> PhaseInfo:
    return PHASE_INFO[phase]


def daily_insight(phase: CyclePhase, day: int) -> str:
    """Pick one of the phase's insights, rotating by ``day``."""
    options = DAILY_INSIGHTS[phase]
    return options[day % len(options)]


def pattern_insights(
    configuration: CycleConfiguration,
    config: PredictorConfig | None = None,
) -> list[str]:
    """Observations about the reported cycle pattern.

    Always returns at least one message.
    """
    cf = (config or get_predictor_config()).confidence
    insights: list[str] = []

    if configuration.cycle_length_days > cf.typical_cycle_max_days:
        insights.append(
            "Your cycles appear longer than average. "
            "This is common and can be influenced by many factors."
        )
    if configuration.cycle_length_days < cf.typical_cycle_min_days:
        insights.append(
            "Your cycles are shorter than average. "
            "Tracking can help you understand your unique pattern."
        )
    if not configuration.is_regular:
        insights.append(
            "Your cycle shows some variation. This is normal for many people, "
            "especially during stress or lifestyle changes."
        )
    if "severe-cramps" in configuration.symptoms:
        insights.append(
            "Experiencing intense cramps is common. Gentle movement and warmth often help."
        )
    if configuration.stress_level == Level.high:
        insights.append(
            "High stress can sometimes affect cycle regularity. Self-care practices may help."
        )

    if not insights:
        insights.append(
            "Your cycle patterns appear within typical ranges. Keep tracking for deeper insights!"
        )
    return insights


def pcos_indicators(
    configuration: CycleConfiguration,
    config: PredictorConfig | None = None,
) -> PcosIndicators:
    cf = (config or get_predictor_config()).confidence
    symptoms = configuration.symptoms
    messages: list[str] = []

    if configuration.cycle_length_days > cf.typical_cycle_max_days:
        messages.append(
            f"Cycles longer than {cf.typical_cycle_max_days} days are sometimes "
            "seen in hormonal variations"
        )
    if "acne" in symptoms and "weight-gain" in symptoms:
        messages.append(
            "Persistent acne with weight changes can sometimes relate to hormonal patterns"
        )
    if "missed-periods" in symptoms and not configuration.is_regular:
        messages.append(
            "Irregular cycles with missed periods are worth discussing with a healthcare provider"
        )

    return PcosIndicators(has_indicators=bool(messages), messages=messages)


def format_date(d: date) -> str:
    """``date(2024, 1, 1)`` → ``"January 1, 2024"``."""
    return f"{d:%B} {d.day}, {d.year}"


def format_date_range(start: date, end: date) -> str:
    """``"Jan 1 - Jan 5"``."""
    return f"{start:%b} {start.day} - {end:%b} {end.day}"
