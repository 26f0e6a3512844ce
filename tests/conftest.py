"""
Shared pytest fixtures for the Clarity Engine test suite.

Provides:
  - Sample criteria / options mirroring the worked examples
    (one "Impact" criterion, options A and B).
  - A three-criterion decision with a high-risk option for narrative
    and report tests.
  - ``isolated_config``: a TOML config in ``tmp_path`` with file logging
    disabled and state/report paths inside ``tmp_path``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from clarity_engine.models.decision import Criterion, Option
from clarity_engine.models.state import DecisionState


# ── Single-criterion example ──────────────────────────────────────────────────

@pytest.fixture
def impact_criteria() -> list[Criterion]:
    return [Criterion(id=1, name="Impact", weight=8)]


@pytest.fixture
def options_ab() -> list[Option]:
    """A scores 10, B scores 5 on Impact; neither is high-risk."""
    return [
        Option(id=101, name="A", scores={1: 10}, is_high_risk=False),
        Option(id=102, name="B", scores={1: 5}, is_high_risk=False),
    ]


# ── Multi-criterion decision ──────────────────────────────────────────────────

@pytest.fixture
def vendor_criteria() -> list[Criterion]:
    return [
        Criterion(id=1, name="Impact", weight=8),
        Criterion(id=2, name="Cost", weight=5),
        Criterion(id=3, name="Speed", weight=3),
    ]


@pytest.fixture
def vendor_options() -> list[Option]:
    return [
        Option(id=201, name="Acme", scores={1: 9, 2: 4, 3: 6}, is_high_risk=False),
        Option(id=202, name="Globex", scores={1: 10, 2: 8, 3: 9}, is_high_risk=True),
        Option(id=203, name="Initech", scores={1: 3}, is_high_risk=False),
    ]


@pytest.fixture
def vendor_state(vendor_criteria, vendor_options) -> DecisionState:
    return DecisionState(criteria=vendor_criteria, options=vendor_options, risk_factor=20)


# ── Config ────────────────────────────────────────────────────────────────────

@pytest.fixture
def isolated_config(tmp_path: Path) -> Path:
    """Write a config file that keeps every path inside ``tmp_path``."""
    cfg = tmp_path / "config" / "test.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text(
        "\n".join([
            "[scoring]",
            "default_risk_factor = 15",
            "",
            "[report]",
            f'output_dir = "{(tmp_path / "reports").as_posix()}"',
            "",
            "[state]",
            f'state_file = "{(tmp_path / "state" / "decision.json").as_posix()}"',
            "",
            "[logging]",
            'level = "DEBUG"',
            'log_file = ""',
        ]),
        encoding="utf-8",
    )
    return cfg


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop CLARITY_ENGINE_* overrides inherited from the shell."""
    for var in (
        "CLARITY_ENGINE_LOG_LEVEL",
        "CLARITY_ENGINE_STATE_FILE",
        "CLARITY_ENGINE_REPORT_DIR",
        "CLARITY_ENGINE_DEBUG",
    ):
        monkeypatch.delenv(var, raising=False)
