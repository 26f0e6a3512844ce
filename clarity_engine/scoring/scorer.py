"""
Clarity Index scoring: converts options + weighted criteria + a global
risk factor into ranked, normalized, risk-adjusted results.

Score formula (range 0–100)
---------------------------
    total_weighted = Σ score(option, c) * c.weight      for c in criteria
    total_weight   = Σ c.weight
    base_score     = total_weighted / (total_weight * 10) * 100
    penalty        = base_score * risk_factor / 100     (high-risk options only)
    final_score    = round_half_up(max(0, base_score - penalty), 1)

Scores are on a 0–10 scale, so ``total_weight * 10`` is the maximum
achievable weighted sum and ``base_score`` lands on 0–100.

When ``total_weight == 0`` (no criteria, or only zero-weight criteria)
every option gets ``final_score = 0``.

Ordering
--------
Results are sorted by ``final_score`` descending with a stable sort, so
options with equal scores keep their input order.  Rank position is read
as a tie-break signal by users; no secondary key is applied.

Everything here is a pure function: no I/O, no validation, no mutation
of the inputs.  Range checks live in ``DecisionState``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from clarity_engine.models.decision import Criterion, Option, Result

_ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class ClarityComponents:
    """Breakdown of one option's Clarity Index.

    Attributes:
        total_weighted_score: Σ score * weight across all criteria.
        total_weight:         Σ weight across all criteria.
        base_score:           Normalized 0–100 score before the risk penalty.
        penalty:              Risk penalty subtracted from ``base_score``.
        final_score:          Clamped, rounded Clarity Index.
    """

    total_weighted_score: int
    total_weight:         int
    base_score:           float
    penalty:              float
    final_score:          float


def round_one_decimal(value: float) -> float:
    """Round ``value`` to one decimal place, halves rounding up.

    ``62.25 → 62.3`` (the built-in ``round()`` would give 62.2).
    """
    return float(Decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def format_one_decimal(value: float) -> str:
    """Format ``value`` with exactly one decimal, e.g. ``20`` → ``"20.0"``."""
    return str(Decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def compute_components(
    option:      Option,
    criteria:    Sequence[Criterion],
    risk_factor: int,
) -> ClarityComponents:
    """Compute the Clarity Index breakdown for a single option.

    Args:
        option:      The option to score.  Missing criterion scores count as 0.
        criteria:    All weighted criteria.
        risk_factor: Global penalty percentage (nominally 0–30).

    Returns:
        ClarityComponents with every field populated.
    """
    total_weighted_score = 0
    total_weight = 0
    for criterion in criteria:
        total_weighted_score += option.score_for(criterion.id) * criterion.weight
        total_weight += criterion.weight

    # Zero total weight: nothing to normalize against
    if total_weight == 0:
        return ClarityComponents(
            total_weighted_score=total_weighted_score,
            total_weight=0,
            base_score=0.0,
            penalty=0.0,
            final_score=0.0,
        )

    base_score = (total_weighted_score / (total_weight * 10)) * 100
    penalty = base_score * (risk_factor / 100) if option.is_high_risk else 0.0
    final_score = round_one_decimal(max(0.0, base_score - penalty))

    return ClarityComponents(
        total_weighted_score=total_weighted_score,
        total_weight=total_weight,
        base_score=base_score,
        penalty=penalty,
        final_score=final_score,
    )


def score_options(
    options:     Sequence[Option],
    criteria:    Sequence[Criterion],
    risk_factor: int,
) -> list[Result]:
    """Score every option and return them ranked by Clarity Index.

    Args:
        options:     Candidate options, in input order.
        criteria:    Weighted criteria.
        risk_factor: Global penalty percentage applied to high-risk options.

    Returns:
        One ``Result`` per option (no filtering), sorted by ``final_score``
        descending.  Equal scores keep their input order.
    """
    results = [
        Result.from_option(
            option,
            final_score=compute_components(option, criteria, risk_factor).final_score,
        )
        for option in options
    ]
    # list.sort is stable; reverse=True keeps equal keys in input order
    results.sort(key=lambda r: r.final_score, reverse=True)
    return results
