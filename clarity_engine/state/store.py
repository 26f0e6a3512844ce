"""
Decision state persistence: a JSON file with three named slots.

File layout::

    {
      "clarity_criteria": [{"id": 1, "name": "Impact", "weight": 8}],
      "clarity_options":  [{"id": 101, "name": "Project A",
                            "scores": {"1": 7}, "is_high_risk": false}],
      "clarity_risk":     15
    }

A missing file yields the first-run defaults.  A missing slot falls back
to that slot's default while the other slots are kept.  Anything that
fails validation raises ``StateError``; the CLI turns that into an
``[ERROR]`` line and exit code 1.

Writes go to a sibling temp file that is then renamed over the target,
so a crash mid-write never leaves a truncated state file behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from clarity_engine.models.decision import Criterion, Option
from clarity_engine.models.state import DecisionState
from clarity_engine.utils.files import default_file_mode

logger = logging.getLogger(__name__)

CRITERIA_SLOT = "clarity_criteria"
OPTIONS_SLOT = "clarity_options"
RISK_SLOT = "clarity_risk"

DEFAULT_RISK_FACTOR = 15


class StateError(Exception):
    """Raised when a decision state file cannot be parsed or validated."""


def default_state() -> DecisionState:
    """Return the first-run decision: one criterion, one option, risk 15."""
    return DecisionState(
        criteria=[Criterion(id=1, name="Impact", weight=8)],
        options=[Option(id=101, name="Project A", scores={1: 7}, is_high_risk=False)],
        risk_factor=DEFAULT_RISK_FACTOR,
    )


def state_from_dict(raw: dict[str, Any]) -> DecisionState:
    """Build a ``DecisionState`` from slot-keyed data, defaulting missing slots.

    Raises:
        StateError: If any slot fails validation.
    """
    defaults = default_state()
    try:
        return DecisionState(
            criteria=raw.get(CRITERIA_SLOT, defaults.criteria),
            options=raw.get(OPTIONS_SLOT, defaults.options),
            risk_factor=raw.get(RISK_SLOT, defaults.risk_factor),
        )
    except ValidationError as exc:
        raise StateError(f"Invalid decision state: {exc}") from exc


def state_to_dict(state: DecisionState) -> dict[str, Any]:
    """Serialize ``state`` into the slot-keyed JSON layout."""
    return {
        CRITERIA_SLOT: [c.model_dump() for c in state.criteria],
        OPTIONS_SLOT: [o.model_dump(mode="json") for o in state.options],
        RISK_SLOT: state.risk_factor,
    }


def load_state(path: Path) -> DecisionState:
    """Load the decision state from ``path``.

    Returns:
        The stored state, or ``default_state()`` when the file does not exist.

    Raises:
        StateError: If the file is not valid JSON, is not a JSON object,
            or fails validation.
    """
    if not path.exists():
        logger.debug("No decision state at %s; using defaults", path)
        return default_state()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise StateError(f"Could not read decision state {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise StateError(f"Decision state {path} must contain a JSON object.")

    state = state_from_dict(raw)
    logger.debug(
        "Loaded decision state from %s (%d criteria, %d options)",
        path, len(state.criteria), len(state.options),
    )
    return state


def save_state(state: DecisionState, path: Path) -> Path:
    """Write ``state`` to ``path`` (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(state_to_dict(state), indent=2)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.chmod(tmp_name, default_file_mode())
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Decision state written: %s", path)
    return path


def reset_state(path: Path) -> bool:
    """Delete the stored state so the next load returns the defaults.

    Returns:
        True if a file was removed, False if there was nothing to remove.
    """
    if not path.exists():
        return False
    path.unlink()
    logger.info("Decision state cleared: %s", path)
    return True
