"""
Planning report writers: CSV and JSON output for one planning pass.

Pure I/O over in-memory results; nothing here recomputes a figure.

Output files
------------
  <output_dir>/
    scenarios_{date}.csv   -- the three coverage scenarios, recommended flag
    planning_{date}.json   -- readiness, scenarios, recommendation, rationale
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Any, Optional

from energy_readiness.pipeline.planner import PlanningOutcome
from energy_readiness.scenarios.simulator import Scenario

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1"

SCENARIO_FIELDS = [
    "coverage_pct", "label", "energy_offset_kwh", "annual_savings",
    "payback_years", "co2_reduced_tons", "recommended", "best_by_savings",
]


def scenario_row(
    scenario: Scenario,
    recommended: Optional[Scenario] = None,
    best: Optional[Scenario] = None,
) -> dict[str, Any]:
    """Flatten a scenario into a display row (payback blank when absent)."""
    return {
        "coverage_pct":      round(scenario.coverage_fraction * 100),
        "label":             scenario.label,
        "energy_offset_kwh": scenario.energy_offset,
        "annual_savings":    scenario.annual_savings,
        "payback_years":     (
            round(scenario.payback_years, 2) if scenario.payback_years is not None else None
        ),
        "co2_reduced_tons":  round(scenario.co2_reduced_tons, 2),
        "recommended":       scenario == recommended,
        "best_by_savings":   scenario == best,
    }


def write_scenarios_csv(
    scenarios: list[Scenario],
    output_dir: Path,
    recommended: Optional[Scenario] = None,
    best: Optional[Scenario] = None,
    run_date: date | None = None,
) -> Path:
    """Write the scenario table to ``scenarios_{date}.csv``.

    Args:
        scenarios:   Output of ``simulate_scenarios()``.
        output_dir:  Target directory (created if missing).
        recommended: Scenario to flag as recommended.
        best:        Scenario to flag as best by savings.
        run_date:    Date label for the filename. Defaults to today.

    Returns:
        Path to the written CSV file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = output_dir / f"scenarios_{run_date}.csv"

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=SCENARIO_FIELDS)
        writer.writeheader()
        for s in scenarios:
            row = scenario_row(s, recommended, best)
            if row["payback_years"] is None:
                row["payback_years"] = ""
            writer.writerow(row)

    logger.info("Scenario CSV written: %s (%d rows)", csv_path, len(scenarios))
    return csv_path


def build_planning_payload(outcome: PlanningOutcome, run_date: date) -> dict[str, Any]:
    """Structured dict for ``write_planning_json``; ``has_data`` False means no data."""
    payload: dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "generated_at":   run_date.isoformat(),
        "has_data":       outcome.has_data,
        "parameters":     outcome.parameters.model_dump(),
        "annual_kwh":     round(outcome.annual_kwh, 2),
        "summary":        asdict(outcome.summary) if outcome.summary else None,
        "features":       asdict(outcome.features) if outcome.features else None,
        "readiness":      None,
        "scenarios":      [],
        "recommendation": None,
    }

    if outcome.readiness is not None:
        r = outcome.readiness
        payload["readiness"] = {
            "final_score": r.final_score,
            "level":       r.level.value,
            "narrative":   r.narrative,
            "breakdown":   [{"name": b.name, "value": b.value} for b in r.breakdown],
        }

    rec = outcome.recommendation
    selected = rec.selected_scenario if rec else None
    payload["scenarios"] = [
        scenario_row(s, selected, outcome.best_scenario) for s in outcome.scenarios or []
    ]

    if rec is not None:
        payload["recommendation"] = {
            "selected_label":  rec.selected_scenario.label,
            "coverage_pct":    round(rec.selected_scenario.coverage_fraction * 100),
            "readiness_score": rec.readiness_score,
            "readiness_level": rec.readiness_level.value if rec.readiness_level else None,
            "rationale":       rec.rationale,
            "best_by_savings": outcome.best_scenario.label if outcome.best_scenario else None,
        }
    return payload


def write_planning_json(
    outcome: PlanningOutcome,
    output_dir: Path,
    run_date: date | None = None,
) -> Path:
    """Write the whole planning pass to ``planning_{date}.json``.

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"planning_{run_date}.json"

    payload = build_planning_payload(outcome, run_date)
    json_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Planning JSON written: %s", json_path)
    return json_path
