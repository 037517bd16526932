"""
Statistical features of a monthly consumption series.

``extract_features()`` reduces a ``ConsumptionSeries`` to the fixed
``FeatureSet`` consumed by the readiness scorer. It is a pure function of
the kWh values and is recomputed whenever the series changes.

Feature definitions
-------------------
    mean, peak, min          over the kWh values
    stdev                    sqrt(population variance)   (divide by n, not n−1)
    coefficient_of_variation stdev / mean
    growth_rate              (last − first) / first       first-vs-last trend only
    peak_ratio               peak / mean

Degenerate statistics
---------------------
Records are validated to kWh > 0, so a zero mean or zero first value should
not reach this module. If one does, fixed substitutes are used instead of
dividing by zero:

    mean == 0   →  coefficient_of_variation = 999  (maximally unstable)
                   peak_ratio               = 0
    first == 0  →  growth_rate              = 0    (no trend signal)

The substitutes are part of the scoring contract: CV = 999 drives Stability
to 0 and growth 0 keeps GrowthPressure at 100.

``summarize_consumption()`` is the descriptive companion used by report
views: average, peak period and the five heaviest periods.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from energy_readiness.models.consumption import ConsumptionSeries

logger = logging.getLogger(__name__)

CV_ZERO_MEAN_SENTINEL = 999.0
TOP_PERIODS = 5


@dataclass(frozen=True)
class FeatureSet:
    """Fixed statistical feature set for one consumption series.

    Attributes:
        count:                    Number of records (> 0).
        mean:                     Mean kWh per period.
        peak:                     Largest kWh value.
        min:                      Smallest kWh value.
        stdev:                    Population standard deviation of kWh.
        coefficient_of_variation: stdev / mean, or 999 when mean == 0.
        growth_rate:              (last − first) / first, or 0 when first == 0.
        peak_ratio:               peak / mean, or 0 when mean == 0.
    """

    count: int
    mean: float
    peak: float
    min: float
    stdev: float
    coefficient_of_variation: float
    growth_rate: float
    peak_ratio: float


@dataclass(frozen=True)
class ConsumptionSummary:
    """Descriptive summary for consumption analysis views.

    Attributes:
        count:        Number of records.
        total_kwh:    Sum of all kWh values.
        average_kwh:  Mean kWh per period.
        peak_period:  Period label of the heaviest record (first on ties).
        peak_kwh:     kWh of that record.
        top_periods:  Up to five ``(period, kwh)`` pairs, heaviest first;
                      equal values keep their source order.
    """

    count: int
    total_kwh: float
    average_kwh: float
    peak_period: str
    peak_kwh: float
    top_periods: list[tuple[str, float]]


def extract_features(series: ConsumptionSeries) -> FeatureSet | None:
    """Compute the ``FeatureSet`` for ``series``.

    Args:
        series: Normalized consumption series, oldest first.

    Returns:
        The feature set, or ``None`` when the series is empty (no features
        are computable and downstream scoring is unavailable).
    """
    values = series.values
    n = len(values)
    if n == 0:
        logger.warning("Feature extraction skipped: consumption series is empty")
        return None

    mean = sum(values) / n
    peak = max(values)
    low = min(values)

    variance = sum((v - mean) ** 2 for v in values) / n
    stdev = math.sqrt(variance)

    cv = CV_ZERO_MEAN_SENTINEL if mean == 0 else stdev / mean

    first, last = values[0], values[-1]
    growth_rate = 0.0 if first == 0 else (last - first) / first

    peak_ratio = 0.0 if mean == 0 else peak / mean

    features = FeatureSet(
        count=n,
        mean=mean,
        peak=peak,
        min=low,
        stdev=stdev,
        coefficient_of_variation=cv,
        growth_rate=growth_rate,
        peak_ratio=peak_ratio,
    )
    logger.debug("Extracted features: %s", features)
    return features


def summarize_consumption(series: ConsumptionSeries) -> ConsumptionSummary | None:
    """Summarize ``series`` for display; ``None`` when it is empty."""
    records = series.records
    if not records:
        return None

    total = sum(r.kwh for r in records)

    peak = records[0]
    for rec in records[1:]:
        if rec.kwh > peak.kwh:
            peak = rec

    # sorted() is stable, so equal kWh values keep source order
    ranked = sorted(records, key=lambda r: r.kwh, reverse=True)[:TOP_PERIODS]

    return ConsumptionSummary(
        count=len(records),
        total_kwh=total,
        average_kwh=total / len(records),
        peak_period=peak.period,
        peak_kwh=peak.kwh,
        top_periods=[(r.period, r.kwh) for r in ranked],
    )
