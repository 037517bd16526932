"""
Readiness-driven scenario recommendation.

Selection (evaluated in order, first match wins):
    1. score present and >= 80  → 70% coverage
    2. score present and >= 60  → 50% coverage
    3. score present (below 60) → 30% coverage
    4. score absent             → 50% coverage (balanced default)

The band used for both the selection and the rationale comes from
``readiness.scorer.classify_level`` so the two cannot drift apart. An absent
score (``None``) is a separate state from a score of 0: 0 is a LOW score and
selects the conservative scenario.

``best_by_savings()`` is a display-only comparison: the scenario with the
largest ``annual_savings`` (first in coverage order on ties). It never
changes the readiness-driven choice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from energy_readiness.readiness.scorer import ReadinessLevel, classify_level
from energy_readiness.scenarios.simulator import Scenario

logger = logging.getLogger(__name__)

DEFAULT_COVERAGE = 0.50

COVERAGE_BY_LEVEL: dict[ReadinessLevel, float] = {
    ReadinessLevel.HIGH:   0.70,
    ReadinessLevel.MEDIUM: 0.50,
    ReadinessLevel.LOW:    0.30,
}

EVALUATION_REASON = (
    "Based on the historical electricity consumption, annual demand is estimated "
    "and renewable coverage scenarios are evaluated against it."
)

LEVEL_REASONS: dict[ReadinessLevel, str] = {
    ReadinessLevel.HIGH: (
        "High readiness suggests stable consumption and sufficient data, "
        "allowing a higher renewable coverage plan."
    ),
    ReadinessLevel.MEDIUM: (
        "Medium readiness suggests the institution can proceed with moderate "
        "renewable coverage to minimize risk."
    ),
    ReadinessLevel.LOW: (
        "Low readiness suggests starting conservatively while improving data "
        "consistency and performing energy audit activities."
    ),
}

NOT_LINKED_REASON = (
    "Readiness score is not yet linked, so a balanced default scenario is used."
)

OUTPUTS_REASON = (
    "The recommendation includes measurable outputs (annual savings, payback "
    "period, and CO2 reduction) to support decision-making."
)


@dataclass(frozen=True)
class RecommendationResult:
    """The selected scenario and why it was selected.

    Attributes:
        selected_scenario: Scenario chosen by the readiness rule.
        rationale:         Ordered explanation: evaluation basis, band-specific
                           justification, measurable outputs.
        readiness_score:   Score the choice was based on; None if not linked.
        readiness_level:   Band of ``readiness_score``; None if not linked.
    """

    selected_scenario: Scenario
    rationale: list[str]
    readiness_score: Optional[float]
    readiness_level: Optional[ReadinessLevel]

    @property
    def is_linked(self) -> bool:
        return self.readiness_score is not None


def target_coverage(readiness_score: Optional[float]) -> float:
    """Coverage fraction the readiness rule selects for ``readiness_score``."""
    if readiness_score is None:
        return DEFAULT_COVERAGE
    return COVERAGE_BY_LEVEL[classify_level(readiness_score)]


def build_rationale(readiness_score: Optional[float]) -> list[str]:
    """Assemble the three-part rationale for ``readiness_score``."""
    if readiness_score is None:
        band_reason = NOT_LINKED_REASON
    else:
        band_reason = LEVEL_REASONS[classify_level(readiness_score)]
    return [EVALUATION_REASON, band_reason, OUTPUTS_REASON]


def select_recommendation(
    scenarios: list[Scenario],
    readiness_score: Optional[float],
) -> RecommendationResult:
    """Pick the scenario for ``readiness_score`` and explain the choice.

    Args:
        scenarios:       Output of ``simulate_scenarios()``.
        readiness_score: Last known readiness score, or None when no score
                         has been linked.

    Returns:
        ``RecommendationResult``.

    Raises:
        ValueError: If ``scenarios`` has no entry for the selected coverage.
    """
    coverage = target_coverage(readiness_score)
    selected = _find_coverage(scenarios, coverage)
    if selected is None:
        raise ValueError(
            f"No scenario with coverage {coverage:.2f} among "
            f"{[s.coverage_fraction for s in scenarios]}."
        )

    level = classify_level(readiness_score) if readiness_score is not None else None
    logger.info(
        "Recommended %s (readiness=%s)",
        selected.label,
        "not linked" if readiness_score is None else f"{readiness_score:g}",
    )
    return RecommendationResult(
        selected_scenario=selected,
        rationale=build_rationale(readiness_score),
        readiness_score=readiness_score,
        readiness_level=level,
    )


def best_by_savings(scenarios: list[Scenario]) -> Scenario | None:
    """Scenario with the highest annual savings; earliest wins ties."""
    if not scenarios:
        return None
    best = scenarios[0]
    for s in scenarios[1:]:
        if s.annual_savings > best.annual_savings:
            best = s
    return best


# ── Helper ────────────────────────────────────────────────────────────────────

def _find_coverage(scenarios: list[Scenario], coverage: float) -> Scenario | None:
    return next(
        (s for s in scenarios if abs(s.coverage_fraction - coverage) < 1e-9),
        None,
    )
