"""
Flat-file export helpers for spreadsheet analysis.

All functions write to disk and return the written ``Path``.
They accept generic ``list[dict]`` data to stay decoupled from
specific report shapes.

CSV exports are flat (no nested dicts) so they load directly in Excel,
Google Sheets, or pandas without any pre-processing step.

``flatten_results_for_export()`` is the main adapter function: it turns
ranked ``Result`` objects into one row per option with every criterion
score as its own column.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Sequence

from clarity_engine.models.decision import Criterion, Result


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed JSON file.

    Args:
        data: Dict or list to serialise.
        path: Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def result_columns(criteria: Sequence[Criterion]) -> list[str]:
    """Column order for ``flatten_results_for_export()`` rows."""
    return [
        "rank", "option_id", "option",
        *(f"score_{c.id}" for c in criteria),
        "is_high_risk", "final_score",
    ]


def flatten_results_for_export(
    criteria: Sequence[Criterion],
    results:  Sequence[Result],
) -> list[dict]:
    """Flatten ranked results into one row per option.

    Each row contains ``rank`` (1-based, ranked order), ``option_id``,
    ``option``, one ``score_<criterion_id>`` column per criterion (0 when
    the option has no score for it), ``is_high_risk`` and ``final_score``.

    Args:
        criteria: Criteria defining the score columns.
        results:  Ranked results from ``score_options()``.

    Returns:
        List of flat row dicts.
    """
    rows: list[dict] = []
    for rank, res in enumerate(results, start=1):
        row: dict = {"rank": rank, "option_id": res.id, "option": res.name}
        for c in criteria:
            row[f"score_{c.id}"] = res.score_for(c.id)
        row["is_high_risk"] = res.is_high_risk
        row["final_score"] = res.final_score
        rows.append(row)
    return rows


def build_results_payload(
    criteria:    Sequence[Criterion],
    results:     Sequence[Result],
    risk_factor: int,
    narrative:   str,
) -> dict:
    """Structured JSON payload: criteria, risk factor, narrative and ranked rows."""
    return {
        "risk_factor": risk_factor,
        "criteria":    [c.model_dump() for c in criteria],
        "narrative":   narrative,
        "results":     flatten_results_for_export(criteria, results),
    }
