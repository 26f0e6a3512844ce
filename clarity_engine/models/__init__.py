"""
Pydantic data model for decisions.

Modules
-------
decision : Criterion, Option, Result: frozen snapshots fed to the scorer.
state    : DecisionState: the validated input boundary (range checks).
"""
