"""
Tests for clarity_engine.config.load_config.

What we test
------------
1. An explicit TOML file is read and mapped onto the sub-config models.
2. A missing explicit file raises FileNotFoundError.
3. ``local.toml`` beside the config file overrides it, section by section.
4. CLARITY_ENGINE_* environment variables override both.
5. Invalid values fail validation.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from clarity_engine.config import AppConfig, LoggingConfig, ReportConfig, ScoringConfig, load_config


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_explicit_file(self, isolated_config: Path, tmp_path: Path):
        cfg = load_config(isolated_config)
        assert isinstance(cfg, AppConfig)
        assert cfg.logging.level == "DEBUG"
        assert cfg.logging.log_file == ""
        assert cfg.state.state_file == (tmp_path / "state" / "decision.json").as_posix()
        assert cfg.scoring.default_risk_factor == 15

    def test_unset_sections_keep_defaults(self, tmp_path: Path):
        cfg = load_config(_write(tmp_path / "c.toml", "[scoring]\ndefault_risk_factor = 5\n"))
        assert cfg.scoring.default_risk_factor == 5
        assert cfg.report == ReportConfig()
        assert cfg.debug is False

    def test_missing_explicit_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "nope.toml")

    def test_project_debug_flag(self, tmp_path: Path):
        cfg = load_config(_write(tmp_path / "c.toml", "[project]\ndebug = true\n"))
        assert cfg.debug is True

    def test_local_toml_overrides(self, tmp_path: Path):
        base = _write(
            tmp_path / "config" / "base.toml",
            '[report]\nheading = "BASE"\nwrap_width = 60\n',
        )
        _write(tmp_path / "config" / "local.toml", '[report]\nheading = "LOCAL"\n')
        cfg = load_config(base)
        assert cfg.report.heading == "LOCAL"
        assert cfg.report.wrap_width == 60

    def test_env_overrides(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CLARITY_ENGINE_LOG_LEVEL", "warning")
        monkeypatch.setenv("CLARITY_ENGINE_STATE_FILE", "/tmp/other.json")
        monkeypatch.setenv("CLARITY_ENGINE_REPORT_DIR", "/tmp/reports")
        monkeypatch.setenv("CLARITY_ENGINE_DEBUG", "yes")
        cfg = load_config(isolated_config)
        assert cfg.logging.level == "WARNING"
        assert cfg.state.state_file == "/tmp/other.json"
        assert cfg.report.output_dir == "/tmp/reports"
        assert cfg.debug is True

    def test_invalid_value_fails_validation(self, tmp_path: Path):
        with pytest.raises(ValidationError):
            load_config(_write(tmp_path / "c.toml", '[logging]\nlevel = "LOUD"\n'))


class TestSubConfigValidators:
    def test_default_risk_above_max_raises(self):
        with pytest.raises(ValidationError, match="default_risk_factor"):
            ScoringConfig(default_risk_factor=40, max_risk_factor=30)

    def test_negative_default_risk_raises(self):
        with pytest.raises(ValidationError):
            ScoringConfig(default_risk_factor=-1)

    def test_narrow_wrap_width_raises(self):
        with pytest.raises(ValidationError, match="wrap_width"):
            ReportConfig(wrap_width=10)

    def test_level_is_upper_cased(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_config_is_frozen(self):
        cfg = AppConfig()
        with pytest.raises(ValidationError):
            cfg.debug = True
