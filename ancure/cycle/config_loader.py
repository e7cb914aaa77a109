"""Load, validate, and hot-reload the cycle predictor configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  It is
loaded once on first use and cached.  Call ``reload_predictor_config()`` to
re-read it from disk without restarting the API.

Usage::

    from ancure.cycle.config_loader import get_predictor_config

    config = get_predictor_config()
    config.luteal_phase_days                   # 14
    config.fertile_window.days_before_ovulation  # 5
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("ancure.cycle.config")

_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"

PHASE_BOUNDARY_MODES = ("fixed", "scaled")


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class FertileWindowConfig:
    """Offsets of the fertile window relative to the ovulation date."""

    days_before_ovulation: int = 5
    days_after_ovulation: int = 1
    irregular_widening_days: int = 2


@dataclass
class PhaseConfig:
    """How cycle days map onto phases.

    With ``boundaries == "fixed"`` the follicular phase ends on
    ``follicular_end_day`` and the ovulation phase on ``ovulation_end_day``
    whatever the cycle length.  With ``"scaled"`` the ovulation phase starts
    ``luteal_phase_days`` before the end of the cycle and lasts
    ``ovulation_phase_days``.
    """

    boundaries: str = "fixed"
    follicular_end_day: int = 13
    ovulation_end_day: int = 16
    ovulation_phase_days: int = 3


@dataclass
class ConfidenceConfig:
    typical_cycle_min_days: int = 24
    typical_cycle_max_days: int = 35


@dataclass
class ReminderConfig:
    period_lead_days: int = 1
    avoid_pregnancy_lead_days: int = 2


@dataclass
class PredictorConfig:
    """Complete, validated predictor configuration.

    Attributes:
        version:           Config schema version string.
        luteal_phase_days: Days from ovulation to the next period.
        fertile_window:    Fertile window offsets.
        phases:            Phase boundary settings.
        confidence:        Cycle length range considered typical.
        reminders:         Lead times for derived reminders.
    """

    version: str
    luteal_phase_days: int
    fertile_window: FertileWindowConfig
    phases: PhaseConfig
    confidence: ConfidenceConfig
    reminders: ReminderConfig
    _raw: dict = field(default_factory=dict, repr=False)

    def is_typical_length(self, cycle_length_days: int) -> bool:
        c = self.confidence
        return c.typical_cycle_min_days <= cycle_length_days <= c.typical_cycle_max_days


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Predictor config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> PredictorConfig:
    """Validate the raw YAML dict and construct a PredictorConfig.

    Missing sections fall back to the defaults above; every problem found is
    collected and reported together.

    Raises:
        ConfigValidationError: If any value is missing a sane type or range.
    """
    errors: list[str] = []

    def _int(section: dict, key: str, default: int, name: str, minimum: int = 0) -> int:
        value = section.get(key, default)
        try:
            n = int(value)
        except (TypeError, ValueError):
            errors.append(f"{name}.{key} must be an integer, got {value!r}")
            return default
        if n < minimum:
            errors.append(f"{name}.{key} = {n} must be >= {minimum}")
        return n

    def _section(key: str) -> dict[str, Any]:
        value = raw.get(key) or {}
        if not isinstance(value, dict):
            errors.append(f"'{key}' must be a mapping")
            return {}
        return value

    version = str(raw.get("version", "1.0"))
    luteal = _int(raw, "luteal_phase_days", 14, "root", minimum=1)

    fw_raw = _section("fertile_window")
    fertile_window = FertileWindowConfig(
        days_before_ovulation=_int(fw_raw, "days_before_ovulation", 5, "fertile_window"),
        days_after_ovulation=_int(fw_raw, "days_after_ovulation", 1, "fertile_window"),
        irregular_widening_days=_int(fw_raw, "irregular_widening_days", 2, "fertile_window"),
    )

    ph_raw = _section("phases")
    boundaries = ph_raw.get("boundaries", "fixed")
    if boundaries not in PHASE_BOUNDARY_MODES:
        errors.append(
            f"phases.boundaries must be one of {PHASE_BOUNDARY_MODES}, got {boundaries!r}"
        )
    phases = PhaseConfig(
        boundaries=boundaries,
        follicular_end_day=_int(ph_raw, "follicular_end_day", 13, "phases", minimum=1),
        ovulation_end_day=_int(ph_raw, "ovulation_end_day", 16, "phases", minimum=1),
        ovulation_phase_days=_int(ph_raw, "ovulation_phase_days", 3, "phases", minimum=1),
    )
    if phases.ovulation_end_day <= phases.follicular_end_day:
        errors.append("phases.ovulation_end_day must be after phases.follicular_end_day")

    cf_raw = _section("confidence")
    confidence = ConfidenceConfig(
        typical_cycle_min_days=_int(cf_raw, "typical_cycle_min_days", 24, "confidence", minimum=1),
        typical_cycle_max_days=_int(cf_raw, "typical_cycle_max_days", 35, "confidence", minimum=1),
    )
    if confidence.typical_cycle_min_days > confidence.typical_cycle_max_days:
        errors.append("confidence.typical_cycle_min_days exceeds typical_cycle_max_days")

    rm_raw = _section("reminders")
    reminders = ReminderConfig(
        period_lead_days=_int(rm_raw, "period_lead_days", 1, "reminders"),
        avoid_pregnancy_lead_days=_int(rm_raw, "avoid_pregnancy_lead_days", 2, "reminders"),
    )

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return PredictorConfig(
        version=version,
        luteal_phase_days=luteal,
        fertile_window=fertile_window,
        phases=phases,
        confidence=confidence,
        reminders=reminders,
        _raw=raw,
    )


def load_predictor_config(path: Path | None = None) -> PredictorConfig:
    """Load and validate the predictor config from disk.

    Args:
        path: Override path to YAML.  Uses the bundled cycle_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    config = _validate_and_build(_load_yaml(target))
    logger.info("Loaded predictor config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: PredictorConfig | None = None
_config_lock = threading.Lock()


def get_predictor_config() -> PredictorConfig:
    """Return the global PredictorConfig, loading it on first call.  Thread-safe."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_predictor_config()
    return _config


def reload_predictor_config(path: Path | None = None) -> PredictorConfig:
    """Reload the config from disk and replace the global singleton.

    The new file is validated before the lock is taken; if validation fails
    the current config stays in place and the error propagates.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_predictor_config(path)
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded predictor config: %s → %s", old_version, new_config.version)
    return new_config
