"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``     : committed static defaults
  2. ``config/local.toml``       : optional local overrides (gitignored)
  3. ``.env``                    : local env overrides (gitignored)
  4. Environment variables       : ``CLARITY_ENGINE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

CLI commands receive an ``AppConfig`` instance, never raw dicts or
individual env var lookups scattered through the codebase.  The scoring
and narrative functions take no config at all; they are pure.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class ScoringConfig(BaseModel):
    """Risk factor defaults used when the CLI is not given one explicitly."""

    model_config = ConfigDict(frozen=True)

    default_risk_factor: int = 15
    max_risk_factor: int = 30

    @model_validator(mode="after")
    def validate_risk_bounds(self) -> "ScoringConfig":
        if not 0 <= self.default_risk_factor <= self.max_risk_factor:
            raise ValueError(
                f"default_risk_factor must be in [0, {self.max_risk_factor}], "
                f"got {self.default_risk_factor}."
            )
        return self


class ReportConfig(BaseModel):
    """Report document and terminal rendering settings."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/reports"
    heading: str = "CLARITY ENGINE REPORT"
    filename_suffix: str = "_Clarity_Report"
    font_name: str = "Helvetica"
    wrap_width: int = 88

    @field_validator("wrap_width")
    @classmethod
    def validate_wrap_width(cls, v: int) -> int:
        if v < 20:
            raise ValueError(f"wrap_width must be >= 20, got {v}.")
        return v


class StateConfig(BaseModel):
    """Location of the persisted decision state."""

    model_config = ConfigDict(frozen=True)

    state_file: str = "data/state/decision.json"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/clarity_engine.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    It is constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    scoring: ScoringConfig = ScoringConfig()
    report: ReportConfig = ReportConfig()
    state: StateConfig = StateConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.  When the default file
            is absent the built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicitly given ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            raw = _read_toml(default_path)
            config_dir = default_path.parent
        else:
            config_dir = None
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                "Pass an existing TOML file or omit --config to use the defaults."
            )
        raw = _read_toml(config_path)
        config_dir = config_path.parent

    # Also merge local.toml if present (gitignored local overrides)
    if config_dir is not None:
        local_config_path = config_dir / "local.toml"
        if local_config_path.exists():
            raw = _deep_merge(raw, _read_toml(local_config_path))

    # 3. Apply CLARITY_ENGINE_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply CLARITY_ENGINE_* env vars to the raw config dict.

    Supported overrides:
      CLARITY_ENGINE_LOG_LEVEL   → raw["logging"]["level"]
      CLARITY_ENGINE_STATE_FILE  → raw["state"]["state_file"]
      CLARITY_ENGINE_REPORT_DIR  → raw["report"]["output_dir"]
      CLARITY_ENGINE_DEBUG       → raw["debug"]
    """
    if log_level := os.environ.get("CLARITY_ENGINE_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if state_file := os.environ.get("CLARITY_ENGINE_STATE_FILE"):
        raw.setdefault("state", {})["state_file"] = state_file

    if report_dir := os.environ.get("CLARITY_ENGINE_REPORT_DIR"):
        raw.setdefault("report", {})["output_dir"] = report_dir

    if debug := os.environ.get("CLARITY_ENGINE_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    # Flatten top-level keys that may be nested under [project]
    project = raw.pop("project", {})

    return AppConfig(
        scoring=ScoringConfig(**raw.get("scoring", {})),
        report=ReportConfig(**raw.get("report", {})),
        state=StateConfig(**raw.get("state", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
