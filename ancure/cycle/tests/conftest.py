"""Shared fixtures for cycle prediction tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from ancure.cycle.base import CycleConfiguration, CycleGoal
from ancure.cycle.config_loader import PredictorConfig, load_predictor_config
from ancure.cycle.predictor import CyclePredictor

# Reference scenario: 28-day regular cycle, period started on New Year's Day
ANCHOR = date(2024, 1, 1)
TODAY = date(2024, 1, 10)


def make_configuration(**overrides: object) -> CycleConfiguration:
    base = CycleConfiguration(
        age=29,
        cycle_length_days=28,
        last_period_start=ANCHOR,
        period_duration_days=5,
        is_regular=True,
        goal=CycleGoal.track_period,
    )
    return replace(base, **overrides)


@pytest.fixture
def predictor_config() -> PredictorConfig:
    """The bundled cycle_config.yaml."""
    return load_predictor_config()


@pytest.fixture
def predictor(predictor_config: PredictorConfig) -> CyclePredictor:
    return CyclePredictor(predictor_config)


@pytest.fixture
def configuration() -> CycleConfiguration:
    return make_configuration()
