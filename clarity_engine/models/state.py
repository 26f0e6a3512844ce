"""
Decision state snapshot: the input boundary of the engine.

``DecisionState`` bundles the three persisted slots (criteria, options,
risk factor) and is the one place where value ranges are enforced:

  - criterion weight  : 1–10
  - option score      : 0–10
  - risk factor       : 0–30
  - ids               : unique within criteria and within options

The scoring functions never validate; anything that reaches them through
a ``DecisionState`` is already in range.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clarity_engine.models.decision import Criterion, Option

MIN_WEIGHT = 1
MAX_WEIGHT = 10
MIN_SCORE = 0
MAX_SCORE = 10
MIN_RISK_FACTOR = 0
MAX_RISK_FACTOR = 30


class DecisionState(BaseModel):
    """A validated snapshot of one decision.

    Attributes:
        criteria:    Weighted decision factors, in display order.
        options:     Candidate choices, in input order.
        risk_factor: Percentage penalty applied to high-risk options.
    """

    model_config = ConfigDict(frozen=True)

    criteria: list[Criterion] = Field(default_factory=list)
    options: list[Option] = Field(default_factory=list)
    risk_factor: int = 15

    @field_validator("criteria")
    @classmethod
    def validate_criteria(cls, v: list[Criterion]) -> list[Criterion]:
        seen: set[int] = set()
        for c in v:
            if not MIN_WEIGHT <= c.weight <= MAX_WEIGHT:
                raise ValueError(
                    f"Criterion '{c.name}' weight must be in "
                    f"[{MIN_WEIGHT}, {MAX_WEIGHT}], got {c.weight}."
                )
            if c.id in seen:
                raise ValueError(f"Duplicate criterion id {c.id}.")
            seen.add(c.id)
        return v

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: list[Option]) -> list[Option]:
        seen: set[int] = set()
        for opt in v:
            for crit_id, score in opt.scores.items():
                if not MIN_SCORE <= score <= MAX_SCORE:
                    raise ValueError(
                        f"Option '{opt.name}' score for criterion {crit_id} must be "
                        f"in [{MIN_SCORE}, {MAX_SCORE}], got {score}."
                    )
            if opt.id in seen:
                raise ValueError(f"Duplicate option id {opt.id}.")
            seen.add(opt.id)
        return v

    @field_validator("risk_factor")
    @classmethod
    def validate_risk_factor(cls, v: int) -> int:
        if not MIN_RISK_FACTOR <= v <= MAX_RISK_FACTOR:
            raise ValueError(
                f"risk_factor must be in [{MIN_RISK_FACTOR}, {MAX_RISK_FACTOR}], got {v}."
            )
        return v

