"""Derive cycle parameters from logged history.

Logged period starts give an observed cycle length that can replace the
length the user typed in; logged symptoms give the ones that come up most.

Usage::

    average_cycle_length([date(2024, 3, 1), date(2024, 2, 2), date(2024, 1, 5)])  # 28
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from datetime import date
from typing import Iterable

from ancure.cycle.base import CycleConfiguration, SymptomLog

logger = logging.getLogger("ancure.cycle.history")

# Gaps outside (0, 60) days are duplicate entries or missed logs, not cycles
MAX_PLAUSIBLE_GAP_DAYS = 60

# Cycle lengths a configuration accepts; observed averages outside are not applied
ACCEPTED_CYCLE_LENGTHS = range(20, 46)


def cycle_lengths(period_starts: Iterable[date]) -> list[int]:
    """Days between consecutive logged period starts, newest gap first.

    Implausible gaps are skipped.
    """
    starts = sorted(set(period_starts), reverse=True)
    gaps = [(newer - older).days for newer, older in zip(starts, starts[1:])]
    return [g for g in gaps if 0 < g < MAX_PLAUSIBLE_GAP_DAYS]


def average_cycle_length(period_starts: Iterable[date]) -> int | None:
    """Mean of the plausible gaps between period starts, rounded half up.

    Returns None when fewer than two usable starts are logged.
    """
    lengths = cycle_lengths(period_starts)
    if not lengths:
        return None
    n = len(lengths)
    return (2 * sum(lengths) + n) // (2 * n)


def common_symptoms(logs: Iterable[SymptomLog], limit: int = 3) -> list[str]:
    """The ``limit`` most frequently logged symptoms.

    Ties keep the order in which symptoms were first seen in ``logs``.
    """
    counts: Counter[str] = Counter()
    for log in logs:
        counts.update(sorted(log.symptoms))
    return [symptom for symptom, _ in counts.most_common(limit)]


def update_from_history(
    configuration: CycleConfiguration,
    period_starts: Iterable[date],
) -> CycleConfiguration:
    """Apply logged period starts to a configuration.

    The latest logged start becomes ``last_period_start`` if it is newer than
    the configured one, and the observed average replaces
    ``cycle_length_days`` once there is one within the accepted range.
    """
    starts = list(period_starts)
    if not starts:
        return configuration

    changes: dict[str, object] = {}
    latest = max(starts)
    if latest > configuration.last_period_start:
        changes["last_period_start"] = latest

    observed = average_cycle_length(starts)
    if observed is not None and observed in ACCEPTED_CYCLE_LENGTHS:
        if observed != configuration.cycle_length_days:
            changes["cycle_length_days"] = observed

    if not changes:
        return configuration
    logger.debug("Updating cycle configuration from history: %s", changes)
    return replace(configuration, **changes)
