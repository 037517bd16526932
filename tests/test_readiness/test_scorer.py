"""
Tests for energy_readiness/readiness/scorer.py.

What we test
------------
compute_sub_scores():
  - Each sub-score formula and its clamp to [0, 100].
  - Stability strictly decreases as CV grows (inside the unclamped range).
  - CV sentinel 999 drives Stability to 0.

compute_readiness():
  - None in → None out.
  - Flat four-month series → 80 / HIGH with breakdown [100, 90, 11, 100].
  - MEDIUM and LOW examples.
  - final_score is an int in [0, 100]; narrative always matches the level.

classify_level():
  - 80 is HIGH, 60 is MEDIUM, just below each threshold drops a band.

COMPOSITE_WEIGHTS:
  - Fixed values summing to 1.0.
"""

from __future__ import annotations

import math

import pytest

from energy_readiness.features.consumption_features import FeatureSet, extract_features
from energy_readiness.readiness.scorer import (
    COMPOSITE_WEIGHTS,
    NARRATIVES,
    ReadinessLevel,
    classify_level,
    compute_readiness,
    compute_sub_scores,
)


# ── Helpers ────────────────────────────────────────────────────────────────────

def _features(
    count: int = 12,
    cv: float = 0.0,
    growth_rate: float = 0.0,
    peak_ratio: float = 1.0,
) -> FeatureSet:
    return FeatureSet(
        count=count,
        mean=100.0,
        peak=100.0 * peak_ratio,
        min=50.0,
        stdev=100.0 * cv,
        coefficient_of_variation=cv,
        growth_rate=growth_rate,
        peak_ratio=peak_ratio,
    )


# ── Weights ────────────────────────────────────────────────────────────────────

class TestCompositeWeights:
    def test_weight_values(self):
        assert COMPOSITE_WEIGHTS == {
            "stability": 0.35,
            "predictability": 0.25,
            "data_sufficiency": 0.20,
            "growth_pressure": 0.20,
        }

    def test_weights_sum_to_one(self):
        assert math.isclose(sum(COMPOSITE_WEIGHTS.values()), 1.0)


# ── Sub-scores ─────────────────────────────────────────────────────────────────

class TestSubScores:
    def test_stability_formula(self):
        assert compute_sub_scores(_features(cv=0.1)).stability == pytest.approx(80.0)

    def test_stability_clamped_at_zero(self):
        assert compute_sub_scores(_features(cv=0.75)).stability == 0.0

    def test_cv_sentinel_gives_zero_stability(self):
        assert compute_sub_scores(_features(cv=999.0)).stability == 0.0

    def test_stability_strictly_decreasing_in_cv(self):
        cvs = [0.0, 0.05, 0.1, 0.2, 0.3, 0.45]
        scores = [compute_sub_scores(_features(cv=c)).stability for c in cvs]
        assert all(a > b for a, b in zip(scores, scores[1:]))
        assert all(0.0 <= s <= 100.0 for s in scores)

    def test_predictability_flat_is_90(self):
        assert compute_sub_scores(_features(peak_ratio=1.0)).predictability == pytest.approx(90.0)

    def test_predictability_capped_at_100(self):
        # Zero peak ratio (zero-mean substitute) would give 130
        assert compute_sub_scores(_features(peak_ratio=0.0)).predictability == 100.0

    def test_predictability_floor(self):
        assert compute_sub_scores(_features(peak_ratio=4.0)).predictability == 0.0

    @pytest.mark.parametrize(
        "count,expected",
        [(1, 100 / 36), (18, 50.0), (36, 100.0), (60, 100.0)],
    )
    def test_data_sufficiency(self, count, expected):
        assert compute_sub_scores(_features(count=count)).data_sufficiency == pytest.approx(expected)

    def test_growth_pressure_symmetric(self):
        up = compute_sub_scores(_features(growth_rate=0.25)).growth_pressure
        down = compute_sub_scores(_features(growth_rate=-0.25)).growth_pressure
        assert up == pytest.approx(70.0)
        assert down == pytest.approx(70.0)

    def test_growth_pressure_clamped(self):
        assert compute_sub_scores(_features(growth_rate=2.0)).growth_pressure == 0.0


# ── classify_level ─────────────────────────────────────────────────────────────

class TestClassifyLevel:
    @pytest.mark.parametrize(
        "score,level",
        [
            (100, ReadinessLevel.HIGH),
            (80, ReadinessLevel.HIGH),
            (79, ReadinessLevel.MEDIUM),
            (79.99, ReadinessLevel.MEDIUM),
            (60, ReadinessLevel.MEDIUM),
            (59, ReadinessLevel.LOW),
            (0, ReadinessLevel.LOW),
        ],
    )
    def test_thresholds(self, score, level):
        assert classify_level(score) is level


# ── compute_readiness ─────────────────────────────────────────────────────────

class TestComputeReadiness:
    def test_none_features_is_unavailable(self):
        assert compute_readiness(None) is None

    def test_flat_series_scores_80_high(self, flat_series):
        r = compute_readiness(extract_features(flat_series))
        # 100·0.35 + 90·0.25 + 11.1·0.20 + 100·0.20 = 79.7 → 80
        assert r.final_score == 80
        assert r.level is ReadinessLevel.HIGH
        assert [b.value for b in r.breakdown] == [100, 90, 11, 100]
        assert [b.name for b in r.breakdown] == [
            "Stability (CV)",
            "Predictability (Peak)",
            "Data Sufficiency",
            "Growth Pressure",
        ]

    def test_alternating_series_is_medium(self, alternating_series):
        r = compute_readiness(extract_features(alternating_series))
        assert r.final_score == 68
        assert r.level is ReadinessLevel.MEDIUM

    def test_volatile_short_series_is_low(self, make_series):
        r = compute_readiness(extract_features(make_series([2, 4, 4, 4, 5, 5, 7, 9])))
        assert [b.value for b in r.breakdown] == [20, 58, 22, 0]
        assert r.final_score == 26
        assert r.level is ReadinessLevel.LOW

    def test_long_flat_history_scores_98(self, make_series):
        # 35 + 22.5 + 20 + 20 = 97.5 → rounds half up to 98
        r = compute_readiness(extract_features(make_series([250.0] * 36)))
        assert r.final_score == 98

    def test_composite_uses_unrounded_sub_scores(self, flat_series):
        r = compute_readiness(extract_features(flat_series))
        assert r.sub_scores.data_sufficiency == pytest.approx(100 / 9)
        assert r.sub_scores.composite == pytest.approx(79.7222, abs=1e-3)

    @pytest.mark.parametrize(
        "values",
        [[1.0], [5, 500, 5, 500], [100] * 50, [1, 1000], [300, 200, 100, 50, 10]],
    )
    def test_score_is_bounded_int_and_narrative_matches(self, make_series, values):
        r = compute_readiness(extract_features(make_series(values)))
        assert isinstance(r.final_score, int)
        assert 0 <= r.final_score <= 100
        assert r.level is classify_level(r.final_score)
        assert r.narrative == NARRATIVES[r.level]

    def test_one_narrative_per_level(self):
        assert set(NARRATIVES) == set(ReadinessLevel)
        assert len(set(NARRATIVES.values())) == 3
