"""Tests for cycle_config.yaml loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from ancure.cycle.config_loader import (
    ConfigValidationError,
    PredictorConfig,
    _validate_and_build,
    get_predictor_config,
    load_predictor_config,
    reload_predictor_config,
)


class TestConfigLoading:
    def test_load_default_config(self, predictor_config: PredictorConfig) -> None:
        assert predictor_config.version == "1.0"
        assert predictor_config.luteal_phase_days == 14

    def test_fertile_window_offsets(self, predictor_config: PredictorConfig) -> None:
        fw = predictor_config.fertile_window
        assert (fw.days_before_ovulation, fw.days_after_ovulation) == (5, 1)
        assert fw.irregular_widening_days == 2

    def test_phase_defaults_are_fixed(self, predictor_config: PredictorConfig) -> None:
        phases = predictor_config.phases
        assert phases.boundaries == "fixed"
        assert (phases.follicular_end_day, phases.ovulation_end_day) == (13, 16)

    def test_typical_length_range(self, predictor_config: PredictorConfig) -> None:
        assert predictor_config.is_typical_length(24)
        assert predictor_config.is_typical_length(35)
        assert not predictor_config.is_typical_length(36)

    def test_reminder_lead_times(self, predictor_config: PredictorConfig) -> None:
        assert predictor_config.reminders.period_lead_days == 1
        assert predictor_config.reminders.avoid_pregnancy_lead_days == 2


class TestConfigValidation:
    def test_empty_config_uses_defaults(self) -> None:
        config = _validate_and_build({})
        assert config.luteal_phase_days == 14
        assert config.phases.boundaries == "fixed"

    def test_unknown_boundary_mode_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="boundaries"):
            _validate_and_build({"phases": {"boundaries": "proportional"}})

    def test_non_numeric_value_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="luteal_phase_days"):
            _validate_and_build({"luteal_phase_days": "two weeks"})

    def test_inverted_phase_boundaries_raise(self) -> None:
        with pytest.raises(ConfigValidationError, match="ovulation_end_day"):
            _validate_and_build({"phases": {"follicular_end_day": 16, "ovulation_end_day": 13}})

    def test_all_errors_reported_together(self) -> None:
        raw = {
            "luteal_phase_days": 0,
            "confidence": {"typical_cycle_min_days": 40, "typical_cycle_max_days": 30},
        }
        with pytest.raises(ConfigValidationError, match="2 validation error"):
            _validate_and_build(raw)

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "cycle_config.yaml"
        config_file.write_text("phases: [unclosed")
        with pytest.raises(ConfigValidationError, match="YAML parse error"):
            load_predictor_config(path=config_file)

    def test_load_nonexistent_file_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_predictor_config(path=Path("/nonexistent/path/cycle_config.yaml"))


class TestHotReload:
    def test_reload_replaces_singleton(self, tmp_path: Path) -> None:
        config_file = tmp_path / "cycle_config.yaml"
        config_file.write_text(
            'version: "2.0-test"\n'
            "luteal_phase_days: 13\n"
            "phases:\n"
            "  boundaries: scaled\n"
        )
        try:
            new_config = reload_predictor_config(path=config_file)
            assert new_config.version == "2.0-test"
            assert get_predictor_config() is new_config
            assert get_predictor_config().phases.boundaries == "scaled"
        finally:
            reload_predictor_config()

    def test_invalid_reload_keeps_old_config(self, tmp_path: Path) -> None:
        before = get_predictor_config()
        config_file = tmp_path / "cycle_config.yaml"
        config_file.write_text("luteal_phase_days: -1\n")
        with pytest.raises(ConfigValidationError):
            reload_predictor_config(path=config_file)
        assert get_predictor_config() is before
