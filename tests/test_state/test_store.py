"""Tests for clarity_engine.state.store."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path

import pytest

from clarity_engine.models.decision import Criterion, Option
from clarity_engine.models.state import DecisionState
from clarity_engine.state.store import (
    CRITERIA_SLOT,
    OPTIONS_SLOT,
    RISK_SLOT,
    StateError,
    default_state,
    load_state,
    reset_state,
    save_state,
    state_from_dict,
)


# ── default_state ─────────────────────────────────────────────────────────────


def test_default_state_matches_first_run_decision() -> None:
    state = default_state()
    assert state.criteria == [Criterion(id=1, name="Impact", weight=8)]
    assert [o.name for o in state.options] == ["Project A"]
    assert state.options[0].score_for(1) == 7
    assert state.options[0].is_high_risk is False
    assert state.risk_factor == 15


# ── load_state ────────────────────────────────────────────────────────────────


def test_load_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert load_state(tmp_path / "nope.json") == default_state()


def test_load_reads_all_slots(tmp_path: Path) -> None:
    path = tmp_path / "decision.json"
    path.write_text(
        json.dumps(
            {
                CRITERIA_SLOT: [{"id": 1, "name": "Impact", "weight": 8}],
                OPTIONS_SLOT: [
                    {"id": 101, "name": "A", "scores": {"1": 10}, "isHighRisk": True},
                    {"id": 102, "name": "B", "scores": {"1": "abc"}, "is_high_risk": False},
                ],
                RISK_SLOT: 20,
            }
        ),
        encoding="utf-8",
    )
    state = load_state(path)
    assert state.risk_factor == 20
    assert state.options[0].is_high_risk is True
    assert state.options[0].score_for(1) == 10
    assert state.options[1].score_for(1) == 0


def test_missing_slot_falls_back_to_its_default(tmp_path: Path) -> None:
    path = tmp_path / "decision.json"
    path.write_text(json.dumps({RISK_SLOT: 5}), encoding="utf-8")
    state = load_state(path)
    assert state.risk_factor == 5
    assert state.criteria == default_state().criteria
    assert state.options == default_state().options


def test_invalid_json_raises_state_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StateError, match="Could not read"):
        load_state(path)


def test_non_object_json_raises_state_error(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(StateError, match="JSON object"):
        load_state(path)


def test_out_of_range_values_raise_state_error() -> None:
    with pytest.raises(StateError, match="risk_factor"):
        state_from_dict({RISK_SLOT: 45})
    with pytest.raises(StateError, match="weight"):
        state_from_dict({CRITERIA_SLOT: [{"id": 1, "name": "Impact", "weight": 0}]})


# ── save_state ────────────────────────────────────────────────────────────────


def test_save_then_load_preserves_state(tmp_path: Path, vendor_state: DecisionState) -> None:
    path = tmp_path / "nested" / "decision.json"
    assert save_state(vendor_state, path) == path
    assert load_state(path) == vendor_state


def test_save_writes_slot_layout(tmp_path: Path) -> None:
    state = DecisionState(
        criteria=[Criterion(id=1, name="Impact", weight=8)],
        options=[Option(id=101, name="A", scores={1: 9}, is_high_risk=True)],
        risk_factor=10,
    )
    path = save_state(state, tmp_path / "decision.json")
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert set(raw) == {CRITERIA_SLOT, OPTIONS_SLOT, RISK_SLOT}
    assert raw[OPTIONS_SLOT][0]["scores"] == {"1": 9}
    assert raw[RISK_SLOT] == 10


def test_save_leaves_no_temp_files(tmp_path: Path) -> None:
    save_state(default_state(), tmp_path / "decision.json")
    assert [p.name for p in tmp_path.iterdir()] == ["decision.json"]


# ── reset_state ───────────────────────────────────────────────────────────────


def test_reset_removes_file(tmp_path: Path) -> None:
    path = save_state(default_state(), tmp_path / "decision.json")
    assert reset_state(path) is True
    assert not path.exists()


def test_reset_missing_file_returns_false(tmp_path: Path) -> None:
    assert reset_state(tmp_path / "decision.json") is False


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_save_gives_regular_file_permissions(tmp_path: Path) -> None:
    reference = tmp_path / "reference.txt"
    reference.write_text("x", encoding="utf-8")
    path = save_state(default_state(), tmp_path / "state" / "decision.json")
    assert stat.S_IMODE(path.stat().st_mode) == stat.S_IMODE(reference.stat().st_mode)
