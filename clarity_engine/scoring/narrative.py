"""
Strategy narrative: a short deterministic rationale for the top-ranked option.

The text is assembled from fixed templates and values computed from the
scorer output; it is not generated by a model.  Same inputs, same text.

Structure
---------
    Strategy Analysis: "<winner>" is the optimal path, leading by a margin
    of <margin>%. The decision is primarily supported by its performance in
    "<primary strength>". <risk clause>

Risk clause (first match wins)
------------------------------
    1. winner is high-risk            → WARNING referencing the margin
    2. runner-up is high-risk         → stable choice, lower risk than runner-up
    3. otherwise                      → balanced, low-risk recommendation

Primary strength is the criterion with the largest ``score * weight`` for
the winner.  Ties go to the first such criterion in criteria order.
"""

from __future__ import annotations

from typing import Optional, Sequence

from clarity_engine.models.decision import Criterion, Result
from clarity_engine.scoring.scorer import format_one_decimal

INSUFFICIENT_DATA_MESSAGE = (
    "Insufficient data. Add at least two options and provide scores to "
    "generate a strategic analysis."
)

_FALLBACK_STRENGTH = "key metrics"


def pick_winner(results: Sequence[Result]) -> Optional[Result]:
    """Return the top-ranked result, or None when nothing scored above zero."""
    if results and results[0].final_score > 0:
        return results[0]
    return None


def primary_strength(winner: Result, criteria: Sequence[Criterion]) -> str:
    """Name of the criterion contributing the largest weighted score to ``winner``.

    Returns ``"key metrics"`` when there are no criteria or the top one is unnamed.
    """
    if not criteria:
        return _FALLBACK_STRENGTH
    # max() keeps the first maximal element
    best = max(criteria, key=lambda c: winner.score_for(c.id) * c.weight)
    return best.name or _FALLBACK_STRENGTH


def explain(
    winner:   Optional[Result],
    criteria: Sequence[Criterion],
    results:  Sequence[Result],
) -> str:
    """Build the strategy narrative for ``winner``.

    Args:
        winner:   Top-ranked result (usually ``pick_winner(results)``), or None.
        criteria: Weighted criteria used for scoring.
        results:  Ranked results from ``score_options()``.

    Returns:
        ``INSUFFICIENT_DATA_MESSAGE`` when there is no winner, the winner
        scored 0, or fewer than two results exist; otherwise the narrative.
    """
    if winner is None or winner.final_score == 0 or len(results) < 2:
        return INSUFFICIENT_DATA_MESSAGE

    runner_up = results[1]
    margin = format_one_decimal(winner.final_score - runner_up.final_score)
    strength = primary_strength(winner, criteria)

    parts = [
        f'Strategy Analysis: "{winner.name}" is the optimal path, '
        f"leading by a margin of {margin}%.",
        f'The decision is primarily supported by its performance in "{strength}".',
    ]

    if winner.is_high_risk:
        parts.append(
            f"WARNING: This option is high risk. Ensure the {margin}% advantage "
            "is worth the potential volatility."
        )
    elif runner_up.is_high_risk:
        parts.append(
            "This is a stable choice; it outranks competition while maintaining "
            f'a lower risk profile than "{runner_up.name}".'
        )
    else:
        parts.append(
            "This represents a balanced, low-risk recommendation based on your "
            "weighted priorities."
        )

    return " ".join(parts)
