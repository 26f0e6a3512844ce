"""Tests for clarity_engine.reporting.export."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from clarity_engine.reporting.export import (
    build_results_payload,
    export_to_csv,
    export_to_json,
    flatten_results_for_export,
    result_columns,
)
from clarity_engine.scoring.scorer import score_options


@pytest.fixture
def vendor_results(vendor_criteria, vendor_options):
    return score_options(vendor_options, vendor_criteria, 20)


# ── export_to_csv ─────────────────────────────────────────────────────────────


def test_export_to_csv_basic(tmp_path: Path) -> None:
    """Writes a valid CSV with correct headers and values."""
    records = [
        {"option": "Acme", "final_score": 68.8, "is_high_risk": False},
        {"option": "Globex", "final_score": 73.5, "is_high_risk": True},
    ]
    out = tmp_path / "test.csv"
    result = export_to_csv(records, out)

    assert result == out
    with out.open(encoding="utf-8") as f:
        reader = list(csv.DictReader(f))
    assert len(reader) == 2
    assert reader[0]["option"] == "Acme"
    assert reader[1]["is_high_risk"] == "True"


def test_export_to_csv_custom_fieldnames(tmp_path: Path) -> None:
    """Custom fieldnames control column order."""
    out = tmp_path / "cols.csv"
    export_to_csv([{"a": 1, "b": 2, "c": 3}], out, fieldnames=["c", "a"])

    with out.open(encoding="utf-8") as f:
        header = f.readline().strip()
    assert header == "c,a"


def test_export_to_csv_empty_records(tmp_path: Path) -> None:
    """Empty records list writes an empty file without raising."""
    out = tmp_path / "empty.csv"
    assert export_to_csv([], out) == out
    assert out.read_text(encoding="utf-8") == ""


def test_export_to_csv_creates_parent_dirs(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "dir" / "output.csv"
    export_to_csv([{"x": 1}], out)
    assert out.exists()


# ── export_to_json ────────────────────────────────────────────────────────────


def test_export_to_json_dict(tmp_path: Path) -> None:
    out = tmp_path / "a" / "test.json"
    export_to_json({"risk_factor": 15, "count": 2}, out)
    loaded = json.loads(out.read_text(encoding="utf-8"))
    assert loaded == {"risk_factor": 15, "count": 2}


def test_export_to_json_non_serialisable_uses_default_str(tmp_path: Path) -> None:
    from datetime import date

    out = tmp_path / "date.json"
    export_to_json({"date": date(2026, 10, 16)}, out)
    assert json.loads(out.read_text(encoding="utf-8"))["date"] == "2026-10-16"


# ── flatten_results_for_export ────────────────────────────────────────────────


def test_flatten_one_row_per_result_in_rank_order(vendor_criteria, vendor_results) -> None:
    rows = flatten_results_for_export(vendor_criteria, vendor_results)
    assert [r["rank"] for r in rows] == [1, 2, 3]
    assert [r["option"] for r in rows] == ["Globex", "Acme", "Initech"]


def test_flatten_missing_scores_are_zero(vendor_criteria, vendor_results) -> None:
    initech = flatten_results_for_export(vendor_criteria, vendor_results)[2]
    assert initech["score_1"] == 3
    assert initech["score_2"] == 0
    assert initech["score_3"] == 0


def test_flatten_columns_match_result_columns(vendor_criteria, vendor_results) -> None:
    rows = flatten_results_for_export(vendor_criteria, vendor_results)
    assert list(rows[0].keys()) == result_columns(vendor_criteria)


def test_flatten_empty_results(vendor_criteria) -> None:
    assert flatten_results_for_export(vendor_criteria, []) == []


def test_csv_round_trip_of_flat_rows(tmp_path: Path, vendor_criteria, vendor_results) -> None:
    out = export_to_csv(
        flatten_results_for_export(vendor_criteria, vendor_results),
        tmp_path / "results.csv",
        fieldnames=result_columns(vendor_criteria),
    )
    with out.open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows[0]["option"] == "Globex"
    assert rows[0]["final_score"] == "73.5"


# ── build_results_payload ─────────────────────────────────────────────────────


def test_payload_structure(vendor_criteria, vendor_results) -> None:
    payload = build_results_payload(vendor_criteria, vendor_results, 20, "Because.")
    assert payload["risk_factor"] == 20
    assert payload["narrative"] == "Because."
    assert [c["name"] for c in payload["criteria"]] == ["Impact", "Cost", "Speed"]
    assert len(payload["results"]) == 3
