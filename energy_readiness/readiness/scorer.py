"""
Readiness scoring: converts a ``FeatureSet`` into a 0–100 readiness score,
a LOW / MEDIUM / HIGH level, a four-part breakdown and a narrative.

Score formula (weighted sum, range 0–100)
------------------------------------------
    final = round(
        stability          * 0.35   # consumption volatility
        + predictability   * 0.25   # spikiness of the peak
        + data_sufficiency * 0.20   # history length
        + growth_pressure  * 0.20   # trend magnitude
    )

The weights sum to 1.0 and are a fixed behavioural contract: changing any
of them moves institutions across level boundaries.

Sub-scores (each clamped to 0–100)
----------------------------------
stability:
    100 − CV·200.  CV 0 → 100; CV ≥ 0.5 → 0.
predictability:
    130 − peak_ratio·40.  Flat series (ratio 1) → 90; ratio ≥ 3.25 → 0.
data_sufficiency:
    count / 36 · 100.  36 monthly records (three years) → 100.
growth_pressure:
    100 − |growth_rate|·120.  Growth and decline are penalised alike.

The composite is computed from the unrounded sub-scores; the breakdown
shows each sub-score rounded half-up for display.

Levels
------
    final ≥ 80 → HIGH
    final ≥ 60 → MEDIUM
    otherwise  → LOW

Each level carries exactly one narrative, looked up from the level so the
two can never disagree. ``classify_level`` is also the single threshold
source for the recommendation selector.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from energy_readiness.features.consumption_features import FeatureSet
from energy_readiness.utils.numeric import clamp, round_half_up

logger = logging.getLogger(__name__)

STABILITY_WEIGHT = 0.35
PREDICTABILITY_WEIGHT = 0.25
DATA_SUFFICIENCY_WEIGHT = 0.20
GROWTH_PRESSURE_WEIGHT = 0.20

COMPOSITE_WEIGHTS: dict[str, float] = {
    "stability":        STABILITY_WEIGHT,
    "predictability":   PREDICTABILITY_WEIGHT,
    "data_sufficiency": DATA_SUFFICIENCY_WEIGHT,
    "growth_pressure":  GROWTH_PRESSURE_WEIGHT,
}

FULL_CONFIDENCE_PERIODS = 36

HIGH_THRESHOLD = 80
MEDIUM_THRESHOLD = 60


class ReadinessLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


NARRATIVES: dict[ReadinessLevel, str] = {
    ReadinessLevel.HIGH: (
        "The institution is ready for renewable transition planning. "
        "Consumption is stable and there is enough data to plan with confidence."
    ),
    ReadinessLevel.MEDIUM: (
        "Moderately ready. There is some variability or limited data, "
        "but planning can start with caution."
    ),
    ReadinessLevel.LOW: (
        "Low readiness. Consumption is highly variable or the data is insufficient; "
        "improve data collection or run an energy audit before committing."
    ),
}


@dataclass(frozen=True)
class SubScores:
    """The four clamped readiness sub-scores (unrounded).

    Attributes:
        stability:        0–100, from the coefficient of variation.
        predictability:   0–100, from the peak ratio.
        data_sufficiency: 0–100, from the record count.
        growth_pressure:  0–100, from the absolute growth rate.
    """

    stability: float
    predictability: float
    data_sufficiency: float
    growth_pressure: float

    @property
    def composite(self) -> float:
        """Weighted composite before rounding."""
        return (
            self.stability          * STABILITY_WEIGHT
            + self.predictability   * PREDICTABILITY_WEIGHT
            + self.data_sufficiency * DATA_SUFFICIENCY_WEIGHT
            + self.growth_pressure  * GROWTH_PRESSURE_WEIGHT
        )


@dataclass(frozen=True)
class ScoreBreakdownItem:
    name: str
    value: int


@dataclass(frozen=True)
class ReadinessResult:
    """Complete readiness assessment for one consumption series.

    Attributes:
        final_score: Integer composite score, 0–100.
        level:       Level bucket derived from ``final_score``.
        breakdown:   Stability, Predictability, Data Sufficiency and Growth
                     Pressure, in that order, each rounded to an integer.
        narrative:   The fixed message for ``level``.
        sub_scores:  Unrounded sub-scores the composite was built from.
    """

    final_score: int
    level: ReadinessLevel
    breakdown: list[ScoreBreakdownItem]
    narrative: str
    sub_scores: SubScores


def compute_sub_scores(features: FeatureSet) -> SubScores:
    """Map a feature set onto the four clamped sub-scores."""
    stability = clamp(100.0 - features.coefficient_of_variation * 200.0, 0.0, 100.0)
    predictability = clamp(130.0 - features.peak_ratio * 40.0, 0.0, 100.0)
    data_sufficiency = clamp(
        features.count / FULL_CONFIDENCE_PERIODS * 100.0, 0.0, 100.0
    )
    growth_pressure = clamp(100.0 - abs(features.growth_rate) * 120.0, 0.0, 100.0)
    return SubScores(
        stability=stability,
        predictability=predictability,
        data_sufficiency=data_sufficiency,
        growth_pressure=growth_pressure,
    )


def classify_level(score: float) -> ReadinessLevel:
    """Bucket a readiness score; 80 itself is HIGH and 60 itself is MEDIUM."""
    if score >= HIGH_THRESHOLD:
        return ReadinessLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return ReadinessLevel.MEDIUM
    return ReadinessLevel.LOW


def compute_readiness(features: FeatureSet | None) -> ReadinessResult | None:
    """Score a feature set.

    Args:
        features: Output of ``extract_features()``; ``None`` for an empty series.

    Returns:
        ``ReadinessResult``, or ``None`` when no features are available.
        Persisting ``final_score`` for later recommendation runs is the
        caller's job.
    """
    if features is None:
        logger.warning("Readiness score unavailable: no consumption features")
        return None

    subs = compute_sub_scores(features)
    final_score = int(clamp(round_half_up(subs.composite), 0, 100))
    level = classify_level(final_score)

    breakdown = [
        ScoreBreakdownItem("Stability (CV)", round_half_up(subs.stability)),
        ScoreBreakdownItem("Predictability (Peak)", round_half_up(subs.predictability)),
        ScoreBreakdownItem("Data Sufficiency", round_half_up(subs.data_sufficiency)),
        ScoreBreakdownItem("Growth Pressure", round_half_up(subs.growth_pressure)),
    ]

    logger.info(
        "Readiness scored: %d (%s) from %d record(s)",
        final_score, level.value, features.count,
    )
    return ReadinessResult(
        final_score=final_score,
        level=level,
        breakdown=breakdown,
        narrative=NARRATIVES[level],
        sub_scores=subs,
    )
