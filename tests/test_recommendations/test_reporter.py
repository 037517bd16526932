"""
Tests for energy_readiness/recommendations/reporter.py.

What we test
------------
scenario_row():
  - Payback rounded to 2 places, None stays None; flags set by identity.

write_scenarios_csv() / write_planning_json():
  - Dated filenames, header order, blank payback cell.
  - JSON payload for a full pass and for an empty series.
"""

from __future__ import annotations

import csv
import json
from datetime import date

import pytest

from energy_readiness.models.scenario import ScenarioParameters
from energy_readiness.pipeline.planner import run_planning
from energy_readiness.recommendations.reporter import (
    SCENARIO_FIELDS,
    SCHEMA_VERSION,
    scenario_row,
    write_planning_json,
    write_scenarios_csv,
)
from energy_readiness.scenarios.simulator import simulate_scenarios

RUN_DATE = date(2025, 3, 1)


@pytest.fixture
def scenarios(default_params):
    return simulate_scenarios(120_000.0, default_params)


class TestScenarioRow:
    def test_row_values(self, scenarios):
        row = scenario_row(scenarios[1], recommended=scenarios[1], best=scenarios[2])
        assert row["coverage_pct"] == 50
        assert row["label"] == "50% Renewable"
        assert row["energy_offset_kwh"] == 60_000
        assert row["annual_savings"] == 720_000
        assert row["payback_years"] == 2.08
        assert row["co2_reduced_tons"] == 42.0
        assert row["recommended"] is True
        assert row["best_by_savings"] is False

    def test_absent_payback_stays_none(self):
        s = simulate_scenarios(1000.0, ScenarioParameters(rate_per_unit=0.0))[0]
        assert scenario_row(s)["payback_years"] is None


class TestWriteScenariosCsv:
    def test_writes_dated_file(self, tmp_path, scenarios):
        path = write_scenarios_csv(
            scenarios, tmp_path / "out", recommended=scenarios[2], run_date=RUN_DATE
        )
        assert path.name == "scenarios_2025-03-01.csv"
        with path.open(encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            assert reader.fieldnames == SCENARIO_FIELDS
            rows = list(reader)
        assert [r["label"] for r in rows] == ["30% Renewable", "50% Renewable", "70% Renewable"]
        assert [r["recommended"] for r in rows] == ["False", "False", "True"]

    def test_blank_payback_cell(self, tmp_path):
        scenarios = simulate_scenarios(1000.0, ScenarioParameters(rate_per_unit=0.0))
        path = write_scenarios_csv(scenarios, tmp_path, run_date=RUN_DATE)
        with path.open(encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        assert all(r["payback_years"] == "" for r in rows)


class TestWritePlanningJson:
    def test_full_payload(self, tmp_path, flat_series, default_params):
        outcome = run_planning(flat_series, default_params)
        path = write_planning_json(outcome, tmp_path, run_date=RUN_DATE)
        assert path.name == "planning_2025-03-01.json"

        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["schema_version"] == SCHEMA_VERSION
        assert payload["generated_at"] == "2025-03-01"
        assert payload["has_data"] is True
        assert payload["readiness"]["final_score"] == 80
        assert payload["readiness"]["level"] == "HIGH"
        assert [b["value"] for b in payload["readiness"]["breakdown"]] == [100, 90, 11, 100]
        assert len(payload["scenarios"]) == 3
        assert payload["recommendation"]["selected_label"] == "70% Renewable"
        assert payload["recommendation"]["coverage_pct"] == 70
        assert len(payload["recommendation"]["rationale"]) == 3
        assert payload["summary"]["peak_kwh"] == 100.0

    def test_empty_payload(self, tmp_path, empty_series, default_params):
        outcome = run_planning(empty_series, default_params)
        payload = json.loads(
            write_planning_json(outcome, tmp_path, run_date=RUN_DATE).read_text(encoding="utf-8")
        )
        assert payload["has_data"] is False
        assert payload["readiness"] is None
        assert payload["scenarios"] == []
        assert payload["recommendation"] is None
        assert payload["parameters"]["rate_per_unit"] == 12.0
