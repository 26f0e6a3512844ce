"""
Decision models: criteria, options, and scored results.

``Criterion`` is a weighted decision factor.  ``Option`` is a candidate
choice holding a sparse ``criterion_id → score`` mapping plus a high-risk
flag.  ``Result`` is an ``Option`` augmented with its Clarity Index
(``final_score``), produced fresh by the scorer on every call.

All three are frozen; the scoring functions receive immutable snapshots
and never alias caller-owned structures.

Range limits (weight 1–10, score 0–10) are NOT enforced here.  They are
checked at the input boundary (``DecisionState``); the scorer accepts zero
weights and out-of-range scores without raising.

Score coercion
--------------
Scores are coerced once, at construction, so lookups never have to guess::

    7       -> 7
    7.9     -> 7      (truncated toward zero)
    "8"     -> 8
    "8.5"   -> 8
    "8abc"  -> 8      (leading integer only)
    None    -> 0
    "abc"   -> 0
    nan     -> 0
"""

from __future__ import annotations

import math
import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def coerce_score(value: Any) -> int:
    """Coerce a raw score input to an int, falling back to 0 when non-numeric.

    Strings are read up to the first non-digit, so ``"8abc"`` and ``"8.5"``
    both give 8.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return 0 if not math.isfinite(value) else int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return 0


class Criterion(BaseModel):
    """A weighted decision factor.

    Attributes:
        id:     Identifier referenced by ``Option.scores`` keys.
        name:   Display label, e.g. ``"Impact"``.
        weight: Relative importance; nominally 1–10.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    weight: int


class Option(BaseModel):
    """A candidate choice scored against each criterion.

    Attributes:
        id:           Option identifier.
        name:         Display label.
        scores:       Sparse mapping ``criterion_id → score`` (nominally 0–10).
                      Missing entries count as 0.
        is_high_risk: When True the global risk factor penalty applies.
                      Also accepted as ``isHighRisk`` on input.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    scores: dict[int, int] = Field(default_factory=dict)
    is_high_risk: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_high_risk", "isHighRisk"),
    )

    @field_validator("scores", mode="before")
    @classmethod
    def coerce_scores(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {key: coerce_score(val) for key, val in v.items()}
        return v

    def score_for(self, criterion_id: int) -> int:
        """Return this option's score for ``criterion_id``, or 0 when absent."""
        return self.scores.get(criterion_id, 0)


class Result(Option):
    """An ``Option`` with its risk-adjusted Clarity Index.

    Attributes:
        final_score: 0–100, rounded to one decimal place.
    """

    final_score: float

    @classmethod
    def from_option(cls, option: Option, final_score: float) -> "Result":
        """Build a Result from ``option`` without touching the source object."""
        return cls(**option.model_dump(exclude={"final_score"}), final_score=final_score)
