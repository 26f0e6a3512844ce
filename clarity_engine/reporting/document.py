"""
Decision report document: renders criteria, ranked results and the
strategy narrative into a single DOCX file.

Layout (top to bottom)
----------------------
  1. Header          : fixed heading + "Generated: <date>"
  2. Recommendation  : shaded callout with "TOP RECOMMENDATION:", the top result
                        name and its Clarity Index
  3. Analysis        : "STRATEGIC ANALYSIS:" + narrative (italic; Word
                        wraps it to the page width)
  4. Table           : Option | <one column per criterion> | Risk | Score,
                        one row per result in ranked order

File name: ``<title, whitespace runs and path characters → "_"><filename_suffix>.docx``,
e.g. ``"Q3 vendor pick"`` → ``Q3_vendor_pick_Clarity_Report.docx`` and
``"../escaped"`` → ``_escaped_Clarity_Report.docx``.

Failure handling
----------------
``export_report()`` never raises.  The document is built fully in memory
before anything touches the disk, so a construction failure writes nothing.
The save goes to a temp file in the target directory and is renamed into
place, so a failed write never leaves a half-written report under the final
name.  Either failure is logged with its traceback and returned to the caller
as ``ReportOutcome.notice``.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from docx import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from clarity_engine.config import ReportConfig
from clarity_engine.models.decision import Criterion, Result
from clarity_engine.scoring.scorer import format_one_decimal
from clarity_engine.utils.files import default_file_mode

logger = logging.getLogger(__name__)

SLATE_900 = RGBColor(0x0F, 0x17, 0x2A)
SLATE_600 = RGBColor(0x47, 0x55, 0x69)
GRAY = RGBColor(0x64, 0x64, 0x64)
INDIGO = RGBColor(0x4F, 0x46, 0xE5)
WHITE = RGBColor(0xFF, 0xFF, 0xFF)
BLACK = RGBColor(0x00, 0x00, 0x00)

_CALLOUT_FILL = "F8FAFC"
_TABLE_HEAD_FILL = "0F172A"

_WHITESPACE_RUN = re.compile(r"\s+")
_PATH_CHARS = re.compile(r"[\\/:]")


@dataclass(frozen=True)
class ReportOutcome:
    """What happened on one ``export_report()`` call.

    Attributes:
        path:   Written report file, or None on failure.
        notice: User-facing failure message, or None on success.
    """

    path:   Optional[Path]
    notice: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.path is not None


def report_filename(title: str, suffix: str = "_Clarity_Report") -> str:
    """File name for a report titled ``title``.

    Whitespace runs and path characters (``/``, ``\\``, ``:``) become ``_``
    and leading dots are dropped, so the file always lands directly in the
    report directory.
    """
    stem = _PATH_CHARS.sub("_", _WHITESPACE_RUN.sub("_", title)).lstrip(".")
    return f"{stem}{suffix}.docx"


def format_score_pct(score: float) -> str:
    return f"{format_one_decimal(score)}%"


# ── Construction ──────────────────────────────────────────────────────────────

def _shade(cell, fill_hex: str) -> None:
    """Set the background fill of a table cell."""
    tc_pr = cell._tc.get_or_add_tcPr()
    shading = tc_pr.makeelement(qn("w:shd"), {
        qn("w:fill"): fill_hex,
        qn("w:val"): "clear",
    })
    tc_pr.append(shading)


def _add_run(paragraph, text: str, size: int, color: RGBColor, bold: bool = False,
             italic: bool = False):
    run = paragraph.add_run(text)
    run.font.size = Pt(size)
    run.font.color.rgb = color
    run.bold = bold
    run.italic = italic
    return run


def _add_recommendation_callout(doc, top: Optional[Result]) -> None:
    name = top.name if top is not None else "N/A"
    score = top.final_score if top is not None else 0.0

    table = doc.add_table(rows=1, cols=2)
    table.alignment = WD_TABLE_ALIGNMENT.CENTER
    left, right = table.cell(0, 0), table.cell(0, 1)
    _shade(left, _CALLOUT_FILL)
    _shade(right, _CALLOUT_FILL)

    label = left.paragraphs[0]
    _add_run(label, "TOP RECOMMENDATION:", 12, INDIGO, bold=True)
    _add_run(left.add_paragraph(), name, 18, BLACK, bold=True)

    score_para = right.paragraphs[0]
    score_para.alignment = WD_ALIGN_PARAGRAPH.RIGHT
    _add_run(score_para, format_score_pct(score), 18, BLACK, bold=True)


def _add_results_table(doc, criteria: Sequence[Criterion], results: Sequence[Result]) -> None:
    headers = ["Option", *(c.name for c in criteria), "Risk", "Score"]
    table = doc.add_table(rows=1 + len(results), cols=len(headers))
    table.style = "Table Grid"

    for i, header in enumerate(headers):
        cell = table.cell(0, i)
        _shade(cell, _TABLE_HEAD_FILL)
        _add_run(cell.paragraphs[0], header, 9, WHITE, bold=True)

    for row_idx, res in enumerate(results, start=1):
        values = [
            res.name,
            *(str(res.score_for(c.id)) for c in criteria),
            "Yes" if res.is_high_risk else "No",
            format_score_pct(res.final_score),
        ]
        for col_idx, value in enumerate(values):
            _add_run(table.cell(row_idx, col_idx).paragraphs[0], value, 9, BLACK)


def build_report_document(
    criteria:     Sequence[Criterion],
    results:      Sequence[Result],
    narrative:    str,
    generated_on: date,
    heading:      str = "CLARITY ENGINE REPORT",
    font_name:    str = "Helvetica",
):
    """Assemble the full report in memory.

    Args:
        criteria:     Criteria, one table column each (in this order).
        results:      Ranked results; ``results[0]`` fills the callout.
        narrative:    Strategy narrative from ``explain()``.
        generated_on: Date printed under the heading.
        heading:      Report heading text.
        font_name:    Base font for the Normal style.

    Returns:
        An unsaved ``docx.Document``.
    """
    doc = Document()
    normal = doc.styles["Normal"]
    normal.font.name = font_name
    normal.font.size = Pt(10)

    _add_run(doc.add_paragraph(), heading, 22, SLATE_900, bold=True)
    _add_run(doc.add_paragraph(), f"Generated: {generated_on.isoformat()}", 10, GRAY)

    _add_recommendation_callout(doc, results[0] if results else None)

    _add_run(doc.add_paragraph(), "STRATEGIC ANALYSIS:", 12, SLATE_900, bold=True)
    _add_run(doc.add_paragraph(), narrative, 10, SLATE_600, italic=True)

    _add_results_table(doc, criteria, results)
    return doc


# ── Emission ──────────────────────────────────────────────────────────────────

def _save_atomic(doc, path: Path) -> None:
    """Save ``doc`` to a temp file beside ``path`` and rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".report-", suffix=".docx.tmp")
    os.close(fd)
    try:
        doc.save(tmp_name)
        os.chmod(tmp_name, default_file_mode())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def export_report(
    title:        str,
    criteria:     Sequence[Criterion],
    results:      Sequence[Result],
    narrative:    str,
    output_dir:   Optional[Path] = None,
    config:       Optional[ReportConfig] = None,
    generated_on: Optional[date] = None,
) -> ReportOutcome:
    """Render and write the decision report.

    Args:
        title:        Decision title; determines the file name.
        criteria:     Weighted criteria (table columns).
        results:      Ranked results from ``score_options()``.
        narrative:    Strategy narrative from ``explain()``.
        output_dir:   Target directory.  Defaults to ``config.output_dir``.
        config:       Report settings.  Defaults to ``ReportConfig()``.
        generated_on: Date printed in the header.  Defaults to today.

    Returns:
        ``ReportOutcome`` with ``path`` set on success, or ``notice`` set
        on failure.  Never raises.
    """
    cfg = config or ReportConfig()
    target_dir = Path(output_dir) if output_dir is not None else Path(cfg.output_dir)

    try:
        doc = build_report_document(
            criteria,
            results,
            narrative,
            generated_on=generated_on or date.today(),
            heading=cfg.heading,
            font_name=cfg.font_name,
        )
        path = target_dir / report_filename(title, cfg.filename_suffix)
    except Exception:
        logger.exception("Report construction failed (title=%r)", title)
        return ReportOutcome(
            path=None,
            notice="Could not generate the report. See the log for details.",
        )

    try:
        _save_atomic(doc, path)
    except Exception as exc:
        logger.exception("Report write failed: %s", path)
        return ReportOutcome(path=None, notice=f"Could not write report to {path}: {exc}")

    logger.info(
        "Report written: %s (%d options, %d criteria)", path, len(results), len(criteria)
    )
    return ReportOutcome(path=path)
