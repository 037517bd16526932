"""
End-to-end planning pass: consumption series → recommendation.

Stage order
-----------
  1. summarize_consumption()  descriptive summary
  2. extract_features()       FeatureSet
  3. compute_readiness()      score / level / narrative
  4. annualize_consumption()  annual kWh estimate
  5. simulate_scenarios()     30 / 50 / 70 % coverage rows
  6. select_recommendation()  readiness-driven choice + rationale
  7. best_by_savings()        display-only comparison

Score hand-off
--------------
By default the score computed in step 3 is passed straight to step 6. With
``link_computed_score=False`` the caller's ``stored_score`` is used instead
(``None`` meaning "not linked"), which reproduces a recommendation made from
the persisted slot. Scenario simulation never depends on the score.

An empty series short-circuits: every stage output is ``None`` and
``has_data`` is False, so callers can show a "no data" state instead of
zero-filled scenarios.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from energy_readiness.features.annualize import annualize_consumption
from energy_readiness.features.consumption_features import (
    ConsumptionSummary,
    FeatureSet,
    extract_features,
    summarize_consumption,
)
from energy_readiness.models.consumption import ConsumptionSeries
from energy_readiness.models.scenario import ScenarioParameters
from energy_readiness.readiness.scorer import ReadinessResult, compute_readiness
from energy_readiness.recommendations.selector import (
    RecommendationResult,
    best_by_savings,
    select_recommendation,
)
from energy_readiness.scenarios.simulator import Scenario, simulate_scenarios

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanningOutcome:
    """Everything one planning pass produced.

    Attributes:
        parameters:      Scenario inputs used for this pass.
        summary:         Descriptive consumption summary.
        features:        Statistical feature set.
        readiness:       Readiness assessment.
        annual_kwh:      Annualized demand estimate (0.0 without data).
        scenarios:       The three coverage scenarios.
        recommendation:  Readiness-driven selection and rationale.
        best_scenario:   Highest-savings scenario (comparison only).
    """

    parameters: ScenarioParameters
    summary: Optional[ConsumptionSummary]
    features: Optional[FeatureSet]
    readiness: Optional[ReadinessResult]
    annual_kwh: float
    scenarios: Optional[list[Scenario]]
    recommendation: Optional[RecommendationResult]
    best_scenario: Optional[Scenario]

    @property
    def has_data(self) -> bool:
        return self.features is not None


def run_planning(
    series: ConsumptionSeries,
    params: ScenarioParameters,
    stored_score: Optional[float] = None,
    link_computed_score: bool = True,
) -> PlanningOutcome:
    """Run every planning stage over ``series`` in one synchronous pass.

    Args:
        series:              Normalized consumption series.
        params:              Tariff, system cost and emission factor.
        stored_score:        Score to recommend from when
                             ``link_computed_score`` is False.
        link_computed_score: Hand the freshly computed score to the selector.

    Returns:
        ``PlanningOutcome``; all stage fields are None for an empty series.
    """
    if series.is_empty:
        logger.warning("Planning skipped: no consumption data")
        return PlanningOutcome(
            parameters=params,
            summary=None,
            features=None,
            readiness=None,
            annual_kwh=0.0,
            scenarios=None,
            recommendation=None,
            best_scenario=None,
        )

    summary = summarize_consumption(series)
    features = extract_features(series)
    readiness = compute_readiness(features)

    annual_kwh = annualize_consumption(series)
    scenarios = simulate_scenarios(annual_kwh, params)

    if link_computed_score:
        score = float(readiness.final_score) if readiness is not None else None
    else:
        score = stored_score

    recommendation = select_recommendation(scenarios, score)
    best = best_by_savings(scenarios)

    logger.info(
        "Planning complete: %d record(s), %.0f kWh/yr, recommended %s",
        len(series), annual_kwh, recommendation.selected_scenario.label,
    )
    return PlanningOutcome(
        parameters=params,
        summary=summary,
        features=features,
        readiness=readiness,
        annual_kwh=annual_kwh,
        scenarios=scenarios,
        recommendation=recommendation,
        best_scenario=best,
    )
