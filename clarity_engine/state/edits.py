"""
Decision editing: pure functions that return a new ``DecisionState``.

Each helper rebuilds the state through ``DecisionState`` so the usual range
checks apply, and raises ``StateError`` when the edit cannot be made:

  - unknown criterion / option id
  - removing the last criterion or the last option
  - a value outside its range (weight 1–10, score 0–10, risk 0–30)

Removing a criterion also drops its entry from every option's scores.

New ids are one past the largest existing id (criteria start at 1,
options at 101, matching the first-run defaults).
"""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import ValidationError

from clarity_engine.models.decision import Criterion, Option, coerce_score
from clarity_engine.models.state import DecisionState
from clarity_engine.state.store import StateError

NEW_CRITERION_NAME = "New Metric"
NEW_CRITERION_WEIGHT = 5
NEW_OPTION_NAME = "New Option"

_FIRST_CRITERION_ID = 1
_FIRST_OPTION_ID = 101


def _rebuild(
    state:       DecisionState,
    criteria:    Sequence[Criterion] | None = None,
    options:     Sequence[Option] | None = None,
    risk_factor: int | None = None,
) -> DecisionState:
    try:
        return DecisionState(
            criteria=list(state.criteria if criteria is None else criteria),
            options=list(state.options if options is None else options),
            risk_factor=state.risk_factor if risk_factor is None else risk_factor,
        )
    except ValidationError as exc:
        raise StateError(f"Invalid edit: {exc}") from exc


def _next_id(ids: Sequence[int], first: int) -> int:
    return max(ids, default=first - 1) + 1


def _find_criterion(state: DecisionState, criterion_id: int) -> Criterion:
    for c in state.criteria:
        if c.id == criterion_id:
            return c
    raise StateError(f"No criterion with id {criterion_id}.")


def _find_option(state: DecisionState, option_id: int) -> Option:
    for o in state.options:
        if o.id == option_id:
            return o
    raise StateError(f"No option with id {option_id}.")


def _replace_option(state: DecisionState, option_id: int, **changes: Any) -> DecisionState:
    target = _find_option(state, option_id)
    updated = Option(**{**target.model_dump(), **changes})
    return _rebuild(
        state, options=[updated if o.id == option_id else o for o in state.options]
    )


def _replace_criterion(state: DecisionState, criterion_id: int, **changes: Any) -> DecisionState:
    target = _find_criterion(state, criterion_id)
    updated = Criterion(**{**target.model_dump(), **changes})
    return _rebuild(
        state, criteria=[updated if c.id == criterion_id else c for c in state.criteria]
    )


# ── Criteria ──────────────────────────────────────────────────────────────────

def add_criterion(
    state:  DecisionState,
    name:   str = NEW_CRITERION_NAME,
    weight: int = NEW_CRITERION_WEIGHT,
) -> DecisionState:
    """Append a criterion; options have no score for it until one is set."""
    new_id = _next_id([c.id for c in state.criteria], _FIRST_CRITERION_ID)
    return _rebuild(
        state, criteria=[*state.criteria, Criterion(id=new_id, name=name, weight=weight)]
    )


def remove_criterion(state: DecisionState, criterion_id: int) -> DecisionState:
    """Remove a criterion and its scores.  The last criterion cannot be removed."""
    _find_criterion(state, criterion_id)
    if len(state.criteria) <= 1:
        raise StateError("You need at least one criterion.")

    options = [
        o.model_copy(
            update={"scores": {k: v for k, v in o.scores.items() if k != criterion_id}}
        )
        for o in state.options
    ]
    return _rebuild(
        state,
        criteria=[c for c in state.criteria if c.id != criterion_id],
        options=options,
    )


def rename_criterion(state: DecisionState, criterion_id: int, name: str) -> DecisionState:
    return _replace_criterion(state, criterion_id, name=name)


def set_weight(state: DecisionState, criterion_id: int, weight: int) -> DecisionState:
    return _replace_criterion(state, criterion_id, weight=weight)


# ── Options ───────────────────────────────────────────────────────────────────

def add_option(
    state:        DecisionState,
    name:         str = NEW_OPTION_NAME,
    is_high_risk: bool = False,
) -> DecisionState:
    """Append an option with no scores."""
    new_id = _next_id([o.id for o in state.options], _FIRST_OPTION_ID)
    option = Option(id=new_id, name=name, scores={}, is_high_risk=is_high_risk)
    return _rebuild(state, options=[*state.options, option])


def remove_option(state: DecisionState, option_id: int) -> DecisionState:
    """Remove an option.  The last option cannot be removed."""
    _find_option(state, option_id)
    if len(state.options) <= 1:
        raise StateError("You need at least one option.")
    return _rebuild(state, options=[o for o in state.options if o.id != option_id])


def rename_option(state: DecisionState, option_id: int, name: str) -> DecisionState:
    return _replace_option(state, option_id, name=name)


def set_high_risk(state: DecisionState, option_id: int, is_high_risk: bool) -> DecisionState:
    return _replace_option(state, option_id, is_high_risk=is_high_risk)


def set_score(
    state:        DecisionState,
    option_id:    int,
    criterion_id: int,
    value:        Any,
) -> DecisionState:
    """Set one score.  ``value`` is coerced like any stored score (``"7"`` → 7,
    ``"abc"`` → 0) before the 0–10 range check.
    """
    _find_criterion(state, criterion_id)
    target = _find_option(state, option_id)
    scores = {**target.scores, criterion_id: coerce_score(value)}
    return _replace_option(state, option_id, scores=scores)


# ── Risk factor ───────────────────────────────────────────────────────────────

def set_risk(state: DecisionState, risk_factor: int) -> DecisionState:
    return _rebuild(state, risk_factor=risk_factor)
