"""
Tests for energy_readiness/pipeline/planner.py.

What we test
------------
run_planning():
  - Empty series → has_data False and every stage output None.
  - Default hand-off: the computed score drives the recommendation.
  - link_computed_score=False: the stored score (or None) drives it instead.
  - Scenarios do not depend on the score hand-off.
"""

from __future__ import annotations

import pytest

from energy_readiness.models.scenario import ScenarioParameters
from energy_readiness.pipeline.planner import run_planning
from energy_readiness.readiness.scorer import ReadinessLevel


class TestRunPlanning:
    def test_empty_series(self, empty_series, default_params):
        outcome = run_planning(empty_series, default_params)
        assert not outcome.has_data
        assert outcome.summary is None
        assert outcome.features is None
        assert outcome.readiness is None
        assert outcome.scenarios is None
        assert outcome.recommendation is None
        assert outcome.best_scenario is None
        assert outcome.annual_kwh == 0.0
        assert outcome.parameters == default_params

    def test_full_pass_links_computed_score(self, flat_series, default_params):
        outcome = run_planning(flat_series, default_params)
        assert outcome.has_data
        assert outcome.readiness.final_score == 80
        assert outcome.annual_kwh == pytest.approx(1200.0)
        assert len(outcome.scenarios) == 3
        assert outcome.recommendation.readiness_score == 80.0
        assert outcome.recommendation.readiness_level is ReadinessLevel.HIGH
        assert outcome.recommendation.selected_scenario.coverage_fraction == 0.70
        assert outcome.best_scenario.coverage_fraction == 0.70

    def test_medium_series_selects_fifty(self, alternating_series, default_params):
        outcome = run_planning(alternating_series, default_params)
        assert outcome.recommendation.selected_scenario.coverage_fraction == 0.50

    def test_stored_score_used_when_not_linking(self, flat_series, default_params):
        outcome = run_planning(
            flat_series, default_params, stored_score=10, link_computed_score=False
        )
        assert outcome.readiness.final_score == 80
        assert outcome.recommendation.readiness_score == 10
        assert outcome.recommendation.selected_scenario.coverage_fraction == 0.30

    def test_no_stored_score_means_not_linked(self, flat_series, default_params):
        outcome = run_planning(flat_series, default_params, link_computed_score=False)
        assert not outcome.recommendation.is_linked
        assert outcome.recommendation.selected_scenario.coverage_fraction == 0.50

    def test_scenarios_independent_of_score(self, flat_series, default_params):
        linked = run_planning(flat_series, default_params)
        unlinked = run_planning(flat_series, default_params, link_computed_score=False)
        assert linked.scenarios == unlinked.scenarios

    def test_huge_records_complete_the_pass(self, make_series, default_params):
        outcome = run_planning(make_series([1e308, 1e308]), default_params)
        assert outcome.has_data
        assert 0 <= outcome.readiness.final_score <= 100
        assert len(outcome.scenarios) == 3
        assert outcome.recommendation is not None

    def test_huge_rate_completes_the_pass(self, flat_series):
        # 360 kWh · 1e306 already exceeds the float range
        params = ScenarioParameters(rate_per_unit=1e306)
        outcome = run_planning(flat_series, params)
        assert all(s.payback_years is None for s in outcome.scenarios)
        assert outcome.recommendation.selected_scenario.coverage_fraction == 0.70
