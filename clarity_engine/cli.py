"""
Clarity Engine CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate the decision state.
  4. Execute action (edit, rank, export, etc.); edits are saved back.
  5. Report result to stdout.

Install and run::

    pip install -e .
    clarity-engine --help
    clarity-engine init-state
    clarity-engine validate-config
    clarity-engine add-option --name "Project B" --high-risk
    clarity-engine set-score --option 102 --criterion 1 --value 9
    clarity-engine add-criterion --name Cost --weight 4
    clarity-engine update-criterion --id 1 --weight 10
    clarity-engine set-risk --risk-factor 20
    clarity-engine rank --risk-factor 20
    clarity-engine export-report --title "Q3 vendor pick"
    clarity-engine export-results --format csv --output data/exports/results.csv
    clarity-engine reset-state --yes
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="clarity-engine",
    help="Clarity Engine: weighted decision scoring, narrative, and reports.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from clarity_engine.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from clarity_engine.utils.logging import configure_logging
    configure_logging(config.logging)


def _state_path(config, state_file: Optional[str]) -> Path:
    return Path(state_file) if state_file else Path(config.state.state_file)


def _load_state_or_exit(path: Path):
    """Load the decision state, printing a friendly error and exiting on failure."""
    from clarity_engine.state.store import StateError, load_state

    try:
        return load_state(path)
    except StateError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _resolve_risk_factor(config, state, risk_factor: Optional[int]) -> int:
    """CLI flag wins; otherwise the risk factor stored with the decision."""
    if risk_factor is None:
        return state.risk_factor
    if not 0 <= risk_factor <= config.scoring.max_risk_factor:
        typer.echo(
            f"[ERROR] --risk-factor must be in [0, {config.scoring.max_risk_factor}], "
            f"got {risk_factor}.",
            err=True,
        )
        raise typer.Exit(code=1)
    return risk_factor


def _edit_state_or_exit(config_path: Optional[str], state_file: Optional[str], edit):
    """Load the state, apply ``edit(state)``, save it, and return the new state."""
    from clarity_engine.state.store import StateError, save_state

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    path = _state_path(config, state_file)
    state = _load_state_or_exit(path)
    try:
        state = edit(state)
    except StateError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    save_state(state, path)
    return state


def _score_and_explain(state, risk_factor: int):
    from clarity_engine.scoring.narrative import explain, pick_winner
    from clarity_engine.scoring.scorer import score_options

    results = score_options(state.options, state.criteria, risk_factor)
    winner = pick_winner(results)
    narrative = explain(winner, state.criteria, results)
    return results, winner, narrative


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("init-state")
def init_state(
    state_file: Optional[str] = typer.Option(
        None,
        "--state-file",
        help="Override the decision state path from config.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing state file.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Write the default decision (one criterion, one option) to the state file."""
    from clarity_engine.state.store import default_state, save_state

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    path = _state_path(config, state_file)
    if path.exists() and not force:
        typer.echo(f"[ERROR] State file already exists: {path} (use --force).", err=True)
        raise typer.Exit(code=1)

    state = default_state()
    if state.risk_factor != config.scoring.default_risk_factor:
        state = state.model_copy(update={"risk_factor": config.scoring.default_risk_factor})
    save_state(state, path)
    typer.echo(f"[OK] Decision state written: {path}")


@app.command("add-criterion")
def add_criterion_cmd(
    name: str = typer.Option("New Metric", "--name", help="Criterion name."),
    weight: int = typer.Option(5, "--weight", help="Importance, 1-10."),
    state_file: Optional[str] = typer.Option(
        None, "--state-file", help="Override the decision state path from config."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Add a weighted criterion to the decision."""
    from clarity_engine.state.edits import add_criterion

    state = _edit_state_or_exit(
        config_path, state_file, lambda s: add_criterion(s, name=name, weight=weight)
    )
    added = state.criteria[-1]
    typer.echo(f"[OK] Criterion added: id={added.id} {added.name} x{added.weight}")


@app.command("remove-criterion")
def remove_criterion_cmd(
    criterion_id: int = typer.Option(..., "--id", help="Criterion id to remove."),
    state_file: Optional[str] = typer.Option(
        None, "--state-file", help="Override the decision state path from config."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Remove a criterion and its scores from every option."""
    from clarity_engine.state.edits import remove_criterion

    _edit_state_or_exit(config_path, state_file, lambda s: remove_criterion(s, criterion_id))
    typer.echo(f"[OK] Criterion removed: id={criterion_id}")


@app.command("update-criterion")
def update_criterion_cmd(
    criterion_id: int = typer.Option(..., "--id", help="Criterion id to change."),
    name: Optional[str] = typer.Option(None, "--name", help="New name."),
    weight: Optional[int] = typer.Option(None, "--weight", help="New importance, 1-10."),
    state_file: Optional[str] = typer.Option(
        None, "--state-file", help="Override the decision state path from config."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Rename a criterion and/or change its weight."""
    from clarity_engine.state.edits import rename_criterion, set_weight

    def edit(state):
        if name is not None:
            state = rename_criterion(state, criterion_id, name)
        if weight is not None:
            state = set_weight(state, criterion_id, weight)
        return state

    state = _edit_state_or_exit(config_path, state_file, edit)
    updated = next(c for c in state.criteria if c.id == criterion_id)
    typer.echo(f"[OK] Criterion updated: id={updated.id} {updated.name} x{updated.weight}")


@app.command("add-option")
def add_option_cmd(
    name: str = typer.Option("New Option", "--name", help="Option name."),
    high_risk: bool = typer.Option(False, "--high-risk", help="Flag the option as high risk."),
    state_file: Optional[str] = typer.Option(
        None, "--state-file", help="Override the decision state path from config."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Add an option with no scores."""
    from clarity_engine.state.edits import add_option

    state = _edit_state_or_exit(
        config_path, state_file, lambda s: add_option(s, name=name, is_high_risk=high_risk)
    )
    added = state.options[-1]
    typer.echo(f"[OK] Option added: id={added.id} {added.name}")


@app.command("remove-option")
def remove_option_cmd(
    option_id: int = typer.Option(..., "--id", help="Option id to remove."),
    state_file: Optional[str] = typer.Option(
        None, "--state-file", help="Override the decision state path from config."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Remove an option from the decision."""
    from clarity_engine.state.edits import remove_option

    _edit_state_or_exit(config_path, state_file, lambda s: remove_option(s, option_id))
    typer.echo(f"[OK] Option removed: id={option_id}")


@app.command("update-option")
def update_option_cmd(
    option_id: int = typer.Option(..., "--id", help="Option id to change."),
    name: Optional[str] = typer.Option(None, "--name", help="New name."),
    high_risk: Optional[bool] = typer.Option(
        None, "--high-risk/--low-risk", help="Set or clear the high-risk flag."
    ),
    state_file: Optional[str] = typer.Option(
        None, "--state-file", help="Override the decision state path from config."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Rename an option and/or set its high-risk flag."""
    from clarity_engine.state.edits import rename_option, set_high_risk

    def edit(state):
        if name is not None:
            state = rename_option(state, option_id, name)
        if high_risk is not None:
            state = set_high_risk(state, option_id, high_risk)
        return state

    state = _edit_state_or_exit(config_path, state_file, edit)
    updated = next(o for o in state.options if o.id == option_id)
    risk = "high risk" if updated.is_high_risk else "low risk"
    typer.echo(f"[OK] Option updated: id={updated.id} {updated.name} ({risk})")


@app.command("set-score")
def set_score_cmd(
    option_id: int = typer.Option(..., "--option", help="Option id."),
    criterion_id: int = typer.Option(..., "--criterion", help="Criterion id."),
    value: str = typer.Option(..., "--value", help="Score 0-10; non-numeric input counts as 0."),
    state_file: Optional[str] = typer.Option(
        None, "--state-file", help="Override the decision state path from config."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Set one option's score for one criterion."""
    from clarity_engine.state.edits import set_score

    state = _edit_state_or_exit(
        config_path, state_file, lambda s: set_score(s, option_id, criterion_id, value)
    )
    option = next(o for o in state.options if o.id == option_id)
    typer.echo(
        f"[OK] Score set: {option.name} / criterion {criterion_id} = "
        f"{option.score_for(criterion_id)}"
    )


@app.command("set-risk")
def set_risk_cmd(
    risk_factor: int = typer.Option(..., "--risk-factor", help="Risk penalty percentage (0-30)."),
    state_file: Optional[str] = typer.Option(
        None, "--state-file", help="Override the decision state path from config."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Store the risk factor applied to high-risk options."""
    from clarity_engine.state.edits import set_risk

    _edit_state_or_exit(config_path, state_file, lambda s: set_risk(s, risk_factor))
    typer.echo(f"[OK] Risk factor set: {risk_factor}%")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  State file:          {config.state.state_file}")
    typer.echo(f"  Report directory:    {config.report.output_dir}")
    typer.echo(f"  Default risk factor: {config.scoring.default_risk_factor}%")
    typer.echo(f"  Log level:           {config.logging.level}")
    typer.echo(f"  Debug mode:          {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("rank")
def rank(
    state_file: Optional[str] = typer.Option(
        None,
        "--state-file",
        help="Override the decision state path from config.",
    ),
    risk_factor: Optional[int] = typer.Option(
        None,
        "--risk-factor",
        help="Risk penalty percentage (0-30). Defaults to the stored value.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score all options and print the ranking plus the strategy narrative."""
    from clarity_engine.reporting.formatters import (
        format_recommendation,
        format_results_table,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    state = _load_state_or_exit(_state_path(config, state_file))
    rf = _resolve_risk_factor(config, state, risk_factor)
    results, winner, narrative = _score_and_explain(state, rf)

    typer.echo(format_results_table(state.criteria, results, rf))
    typer.echo(format_recommendation(winner, narrative, config.report.wrap_width))


@app.command("export-report")
def export_report_cmd(
    title: str = typer.Option(
        ...,
        "--title",
        help="Decision title; used for the report file name.",
    ),
    state_file: Optional[str] = typer.Option(
        None,
        "--state-file",
        help="Override the decision state path from config.",
    ),
    risk_factor: Optional[int] = typer.Option(
        None,
        "--risk-factor",
        help="Risk penalty percentage (0-30). Defaults to the stored value.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Override the report directory from config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Write the decision report (.docx).

    Exits with code 1 and prints the failure notice if the report could not
    be generated or written.
    """
    from clarity_engine.reporting.document import export_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    state = _load_state_or_exit(_state_path(config, state_file))
    rf = _resolve_risk_factor(config, state, risk_factor)
    results, _, narrative = _score_and_explain(state, rf)

    outcome = export_report(
        title,
        state.criteria,
        results,
        narrative,
        output_dir=Path(output_dir) if output_dir else None,
        config=config.report,
    )
    if not outcome.ok:
        typer.echo(f"[ERROR] {outcome.notice}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"[OK] Report written: {outcome.path}")


@app.command("export-results")
def export_results(
    fmt: str = typer.Option(
        "csv",
        "--format",
        help="Output format: csv or json.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path. Defaults to <report dir>/results.<format>.",
    ),
    state_file: Optional[str] = typer.Option(
        None,
        "--state-file",
        help="Override the decision state path from config.",
    ),
    risk_factor: Optional[int] = typer.Option(
        None,
        "--risk-factor",
        help="Risk penalty percentage (0-30). Defaults to the stored value.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Export ranked results as a flat CSV or a structured JSON file."""
    from clarity_engine.reporting.export import (
        build_results_payload,
        export_to_csv,
        export_to_json,
        flatten_results_for_export,
        result_columns,
    )

    fmt = fmt.lower()
    if fmt not in ("csv", "json"):
        typer.echo(f"[ERROR] Unsupported format '{fmt}'. Use csv or json.", err=True)
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    state = _load_state_or_exit(_state_path(config, state_file))
    rf = _resolve_risk_factor(config, state, risk_factor)
    results, _, narrative = _score_and_explain(state, rf)

    out_path = Path(output) if output else Path(config.report.output_dir) / f"results.{fmt}"
    if fmt == "csv":
        export_to_csv(
            flatten_results_for_export(state.criteria, results),
            out_path,
            fieldnames=result_columns(state.criteria),
        )
    else:
        export_to_json(build_results_payload(state.criteria, results, rf, narrative), out_path)

    typer.echo(f"[OK] {len(results)} result(s) exported: {out_path}")


@app.command("reset-state")
def reset_state_cmd(
    state_file: Optional[str] = typer.Option(
        None,
        "--state-file",
        help="Override the decision state path from config.",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip the confirmation prompt.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Clear the stored decision so the next command starts from the defaults."""
    from clarity_engine.state.store import reset_state

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    path = _state_path(config, state_file)
    if not yes and not typer.confirm(f"Clear all data in {path}?"):
        typer.echo("Aborted.")
        raise typer.Exit(code=0)

    if reset_state(path):
        typer.echo(f"[OK] Decision state cleared: {path}")
    else:
        typer.echo(f"[OK] Nothing to clear at {path}")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
