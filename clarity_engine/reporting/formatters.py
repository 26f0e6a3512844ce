"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept already-scored data and return plain multi-line
strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Criterion columns are fixed-width; long criterion or option names are
truncated so the table stays aligned::

    Rank  Option                  Impact   Cost  Risk   Score
    --------------------------------------------------------
       1  Project A                   10      6    No  100.0%
       2  Project B                    5      9   Yes   48.0%
"""

from __future__ import annotations

import textwrap
from typing import Optional, Sequence

from clarity_engine.models.decision import Criterion, Result
from clarity_engine.scoring.scorer import format_one_decimal

_NAME_WIDTH = 24
_CRIT_WIDTH = 8


def format_results_table(
    criteria:    Sequence[Criterion],
    results:     Sequence[Result],
    risk_factor: int,
) -> str:
    """Format ranked results as an ASCII table.

    Args:
        criteria:    Criteria, one column each.
        results:     Ranked results from ``score_options()``.
        risk_factor: Shown in the header for context.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Clarity Index Ranking ===")
    weights = ", ".join(f"{c.name} x{c.weight}" for c in criteria) or "(none)"
    lines.append(f"  Criteria:    {weights}")
    lines.append(f"  Risk factor: {risk_factor}%")

    if not results:
        lines.append("")
        lines.append("  (no options to rank; add options to the decision state first)")
        return "\n".join(lines)

    crit_headers = "".join(
        f"  {c.name[:_CRIT_WIDTH]:>{_CRIT_WIDTH}}" for c in criteria
    )
    header = (
        f"  {'Rank':>4}  {'Option':<{_NAME_WIDTH}}{crit_headers}"
        f"  {'Risk':>4}  {'Score':>7}"
    )
    lines.append("")
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))

    for rank, res in enumerate(results, start=1):
        crit_cells = "".join(
            f"  {res.score_for(c.id):>{_CRIT_WIDTH}}" for c in criteria
        )
        risk_str = "Yes" if res.is_high_risk else "No"
        score_str = f"{format_one_decimal(res.final_score)}%"
        lines.append(
            f"  {rank:>4}  {res.name[:_NAME_WIDTH]:<{_NAME_WIDTH}}{crit_cells}"
            f"  {risk_str:>4}  {score_str:>7}"
        )

    return "\n".join(lines)


def format_recommendation(
    winner:     Optional[Result],
    narrative:  str,
    wrap_width: int = 88,
) -> str:
    """Format the top recommendation and its narrative, word-wrapped.

    Args:
        winner:     Result from ``pick_winner()``; None prints ``N/A``.
        narrative:  Text from ``explain()``.
        wrap_width: Maximum line width for the narrative.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    if winner is None:
        lines.append("  TOP RECOMMENDATION: N/A")
    else:
        lines.append(
            f"  TOP RECOMMENDATION: {winner.name} "
            f"({format_one_decimal(winner.final_score)}%)"
        )
    lines.append("")
    lines.append("  STRATEGIC ANALYSIS:")
    lines.extend(
        textwrap.wrap(
            narrative,
            width=wrap_width,
            initial_indent="    ",
            subsequent_indent="    ",
        )
    )
    return "\n".join(lines)
