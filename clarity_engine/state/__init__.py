"""Decision state: JSON persistence (``store``) and pure editing helpers (``edits``)."""
