"""
Energy Readiness CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and normalize the consumption file.
  4. Run the planning stage(s).
  5. Report the result to stdout.

Install and run::

    pip install -e .
    energy-readiness --help
    energy-readiness inspect data/raw/consumption.csv
    energy-readiness score data/raw/consumption.csv
    energy-readiness simulate data/raw/consumption.csv --rate 11.5
    energy-readiness recommend data/raw/consumption.csv
    energy-readiness plan data/raw/consumption.csv --save-score --output-dir data/outputs
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="energy-readiness",
    help="Renewable-transition readiness scoring and coverage scenarios.",
    add_completion=False,
)

_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")
_RATE_OPTION = typer.Option(None, "--rate", help="Electricity rate per kWh (default from config).")
_COST_OPTION = typer.Option(None, "--cost", help="Estimated system cost (default from config).")
_CO2_OPTION = typer.Option(None, "--co2", help="CO2 factor in kg per kWh (default from config).")


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from energy_readiness.config import load_config

    try:
        return load_config(Path(config_path) if config_path else None)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config) -> None:
    from energy_readiness.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _load_series_or_exit(file: str, require_data: bool = True):
    """Import ``file`` and return its IngestionResult, exiting on unusable input."""
    from energy_readiness.ingestion.consumption_file import load_consumption_file

    try:
        result = load_consumption_file(Path(file))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if not result.is_usable:
        for note in result.notes:
            typer.echo(f"[ERROR] {note}", err=True)
        raise typer.Exit(code=1)

    if require_data and not result.has_data:
        typer.echo(
            "[ERROR] No usable consumption records (need a period and kWh > 0). "
            "Fix the file and try again.",
            err=True,
        )
        raise typer.Exit(code=1)
    return result


def _parameters(config, rate: Optional[float], cost: Optional[float], co2: Optional[float]):
    """Config defaults with any ``--rate`` / ``--cost`` / ``--co2`` overrides applied."""
    from energy_readiness.models.scenario import ScenarioParameters

    overrides = {"rate_per_unit": rate, "system_cost": cost, "co2_factor_per_unit": co2}
    values = config.scenario.to_parameters().model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return ScenarioParameters(**values)


def _fmt_payback(years: Optional[float]) -> str:
    return "-" if years is None else f"{years:.1f}"


def _echo_scenarios(scenarios, currency: str, recommended=None, best=None) -> None:
    typer.echo(
        f"  {'Scenario':<15} {'kWh offset/yr':>14} {'Savings/yr (' + currency + ')':>20} "
        f"{'Payback (yrs)':>14} {'CO2 (t/yr)':>11}"
    )
    for s in scenarios:
        marks = ("*" if s == recommended else " ") + ("$" if s == best else " ")
        typer.echo(
            f"{marks}{s.label:<15} {s.energy_offset:>14,} {s.annual_savings:>20,} "
            f"{_fmt_payback(s.payback_years):>14} {s.co2_reduced_tons:>11.2f}"
        )


def _echo_readiness(readiness) -> None:
    typer.echo(f"  Readiness score: {readiness.final_score} / 100 ({readiness.level.value})")
    for item in readiness.breakdown:
        typer.echo(f"    {item.name:<24} {item.value:>3}")
    typer.echo(f"  {readiness.narrative}")


def _echo_recommendation(rec) -> None:
    typer.echo(f"  Recommended scenario: {rec.selected_scenario.label}")
    linked = "not linked" if rec.readiness_score is None else f"{rec.readiness_score:g}"
    typer.echo(f"  Readiness score used: {linked}")
    for i, reason in enumerate(rec.rationale, start=1):
        typer.echo(f"    {i}. {reason}")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPTION,
    show_full: bool = typer.Option(False, "--full", help="Print the full config as JSON."),
) -> None:
    """Validate the configuration file and print parsed values."""
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:  {config.database.db_path}")
    typer.echo(f"  Output dir:     {config.data.output_dir}")
    typer.echo(f"  Rate per kWh:   {config.scenario.rate_per_kwh} {config.scenario.currency}")
    typer.echo(f"  System cost:    {config.scenario.system_cost:,.0f} {config.scenario.currency}")
    typer.echo(f"  CO2 factor:     {config.scenario.co2_factor_kg_per_kwh} kg/kWh")
    typer.echo(f"  Log level:      {config.logging.level}")
    typer.echo(f"  Debug mode:     {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("init-db")
def init_db(
    db_path: Optional[str] = typer.Option(None, "--db-path", help="Override DB path from config."),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Create the SQLite database holding the readiness-score slot.

    Safe to run multiple times.
    """
    from energy_readiness.db.connection import open_score_db
    from energy_readiness.db.schema import ALL_TABLE_NAMES

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target}")
    with open_score_db(config.database, db_path=target):
        pass
    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("inspect")
def inspect(
    file: str = typer.Argument(..., help="Consumption file (.csv, .xlsx, .xls, .json)."),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Validate a consumption file and summarize its usage pattern."""
    from energy_readiness.features.consumption_features import summarize_consumption

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    result = _load_series_or_exit(file, require_data=False)

    typer.echo(f"Columns: {', '.join(result.columns)}")
    typer.echo(f"  period ← {result.period_column}   kWh ← {result.kwh_column}")
    typer.echo(
        f"  Rows read: {result.total_rows}   usable: {len(result.series)}   "
        f"discarded: {result.discarded_rows}"
    )
    typer.echo("Validation notes:")
    for note in result.notes:
        typer.echo(f"  - {note}")

    summary = summarize_consumption(result.series)
    if summary is None:
        typer.echo("[WARN] No usable records; nothing to summarize.")
        raise typer.Exit(code=1)

    typer.echo("")
    typer.echo(f"  Avg monthly usage: {summary.average_kwh:,.0f} kWh")
    typer.echo(f"  Peak month:        {summary.peak_period} ({summary.peak_kwh:,.0f} kWh)")
    typer.echo(f"  Data points:       {summary.count} months")
    typer.echo("  Top months:")
    for period, kwh in summary.top_periods:
        typer.echo(f"    {period:<14} {kwh:>12,.0f} kWh")


@app.command("score")
def score(
    file: str = typer.Argument(..., help="Consumption file."),
    save: bool = typer.Option(True, "--save/--no-save", help="Store the score for `recommend`."),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Compute the readiness score and store it in the score slot."""
    from energy_readiness.db.connection import open_score_db
    from energy_readiness.db.repositories.score_repo import ReadinessScoreRepository
    from energy_readiness.features.consumption_features import extract_features
    from energy_readiness.readiness.scorer import compute_readiness

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    result = _load_series_or_exit(file)

    features = extract_features(result.series)
    readiness = compute_readiness(features)
    assert readiness is not None  # series is non-empty here

    _echo_readiness(readiness)
    typer.echo(
        f"  Avg {features.mean:,.0f} kWh | peak {features.peak:,.0f} kWh | "
        f"stdev {features.stdev:,.0f} | {features.count} months"
    )

    if save:
        with open_score_db(config.database) as conn:
            ReadinessScoreRepository(conn).set(readiness.final_score)
        typer.echo(f"[OK] Readiness score {readiness.final_score} stored.")


@app.command("simulate")
def simulate(
    file: str = typer.Argument(..., help="Consumption file."),
    rate: Optional[float] = _RATE_OPTION,
    cost: Optional[float] = _COST_OPTION,
    co2: Optional[float] = _CO2_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Compare 30 / 50 / 70 % renewable coverage scenarios."""
    from energy_readiness.features.annualize import annualize_consumption
    from energy_readiness.recommendations.selector import best_by_savings
    from energy_readiness.scenarios.simulator import simulate_scenarios

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    result = _load_series_or_exit(file)
    params = _parameters(config, rate, cost, co2)

    annual_kwh = annualize_consumption(result.series)
    scenarios = simulate_scenarios(annual_kwh, params)
    best = best_by_savings(scenarios)

    typer.echo(f"  Estimated annual kWh: {annual_kwh:,.0f}")
    _echo_scenarios(scenarios, config.scenario.currency, best=best)
    typer.echo(f"  Best by savings ($): {best.label}")


@app.command("recommend")
def recommend(
    file: str = typer.Argument(..., help="Consumption file."),
    rate: Optional[float] = _RATE_OPTION,
    cost: Optional[float] = _COST_OPTION,
    co2: Optional[float] = _CO2_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Recommend a scenario using the stored readiness score.

    Without a stored score the balanced 50 % scenario is recommended.
    """
    from energy_readiness.db.connection import open_score_db
    from energy_readiness.db.repositories.score_repo import ReadinessScoreRepository
    from energy_readiness.pipeline.planner import run_planning

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    result = _load_series_or_exit(file)
    params = _parameters(config, rate, cost, co2)

    with open_score_db(config.database) as conn:
        stored = ReadinessScoreRepository(conn).get()

    outcome = run_planning(result.series, params, stored_score=stored, link_computed_score=False)

    typer.echo(f"  Estimated annual kWh: {outcome.annual_kwh:,.0f}")
    _echo_recommendation(outcome.recommendation)
    _echo_scenarios(
        outcome.scenarios, config.scenario.currency,
        recommended=outcome.recommendation.selected_scenario, best=outcome.best_scenario,
    )


@app.command("plan")
def plan(
    file: str = typer.Argument(..., help="Consumption file."),
    rate: Optional[float] = _RATE_OPTION,
    cost: Optional[float] = _COST_OPTION,
    co2: Optional[float] = _CO2_OPTION,
    save_score: bool = typer.Option(False, "--save-score", help="Also store the computed score."),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", help="Write planning JSON + scenario CSV here.",
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Score, simulate and recommend in one pass (computed score is linked directly)."""
    from energy_readiness.pipeline.planner import run_planning
    from energy_readiness.recommendations.reporter import (
        write_planning_json,
        write_scenarios_csv,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    result = _load_series_or_exit(file)
    params = _parameters(config, rate, cost, co2)

    outcome = run_planning(result.series, params)

    _echo_readiness(outcome.readiness)
    typer.echo("")
    typer.echo(f"  Estimated annual kWh: {outcome.annual_kwh:,.0f}")
    _echo_recommendation(outcome.recommendation)
    _echo_scenarios(
        outcome.scenarios, config.scenario.currency,
        recommended=outcome.recommendation.selected_scenario, best=outcome.best_scenario,
    )

    if save_score:
        from energy_readiness.db.connection import open_score_db
        from energy_readiness.db.repositories.score_repo import ReadinessScoreRepository

        with open_score_db(config.database) as conn:
            ReadinessScoreRepository(conn).set(outcome.readiness.final_score)
        typer.echo(f"[OK] Readiness score {outcome.readiness.final_score} stored.")

    if output_dir:
        out = Path(output_dir)
        json_path = write_planning_json(outcome, out)
        csv_path = write_scenarios_csv(
            outcome.scenarios, out,
            recommended=outcome.recommendation.selected_scenario, best=outcome.best_scenario,
        )
        typer.echo(f"[OK] Wrote {json_path} and {csv_path}")


@app.command("clear-score")
def clear_score(config_path: Optional[str] = _CONFIG_OPTION) -> None:
    """Remove the stored readiness score (recommendations fall back to 50 %)."""
    from energy_readiness.db.connection import open_score_db
    from energy_readiness.db.repositories.score_repo import ReadinessScoreRepository

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    with open_score_db(config.database) as conn:
        removed = ReadinessScoreRepository(conn).clear()
    typer.echo("[OK] Stored readiness score cleared." if removed else "No stored score to clear.")


@app.command("forecast")
def forecast(
    file: str = typer.Argument(..., help="Consumption file."),
    steps: int = typer.Option(12, "--steps", help="Months to forecast (1-36)."),
    placeholder: bool = typer.Option(
        False, "--placeholder", help="Show a +1%/month demo projection instead of calling the service.",
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Request a demand forecast (service not connected yet)."""
    from energy_readiness.forecasting.stub import ForecastClient, placeholder_forecast

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    result = _load_series_or_exit(file)

    try:
        if placeholder:
            points = placeholder_forecast(result.series, steps=steps)
        else:
            points = ForecastClient().forecast(result.series, steps=steps)
    except NotImplementedError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        typer.echo("        Use --placeholder for a demo projection.", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo("[WARN] Placeholder projection (+1% per month), not a model forecast.")
    for point in points:
        typer.echo(f"  {point.period:<14} {point.kwh:>12,.0f} kWh")
