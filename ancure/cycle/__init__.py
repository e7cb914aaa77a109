"""Cycle prediction for Ancure.

Modules:
    base          — Configuration / insight / reminder types
    predictor     — Calendar prediction of periods, ovulation and phases
    reminders     — Reminder derivation and due-reminder selection
    guidance      — Phase descriptions and pattern observations
    history       — Cycle length and common symptoms from logged history
    config_loader — cycle_config.yaml loading and hot reload
"""

from ancure.cycle.base import (
    Confidence,
    CycleConfiguration,
    CycleGoal,
    CycleInsights,
    CyclePhase,
    InvalidCycleConfigurationError,
    Level,
    ReminderEntry,
    ReminderKind,
)
from ancure.cycle.predictor import CyclePredictor, calculate_insights
from ancure.cycle.reminders import derive_reminders

__all__ = [
    "Confidence",
    "CycleConfiguration",
    "CycleGoal",
    "CycleInsights",
    "CyclePhase",
    "CyclePredictor",
    "InvalidCycleConfigurationError",
    "Level",
    "ReminderEntry",
    "ReminderKind",
    "calculate_insights",
    "derive_reminders",
]
