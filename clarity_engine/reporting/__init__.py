"""
clarity_engine.reporting: Report rendering and export.

Modules:
  document  : DOCX decision report (header, recommendation, analysis, table).
  formatters: ASCII terminal formatters for Typer CLI commands.
  export    : CSV/JSON flat-file export helpers.
"""
