"""
Scoring engine: turns weighted criteria and option scores into a ranked,
risk-adjusted Clarity Index with a plain-language rationale.

Modules
-------
scorer    : ClarityComponents dataclass + compute_components() +
            score_options(): pure functions, no I/O.
narrative : pick_winner() + primary_strength() + explain(): template-based
            strategy narrative for the top-ranked option.
"""
