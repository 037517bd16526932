"""
Annual consumption estimate used as the scenario simulator's demand input.

Policy (monthly records assumed):
  - 12 or more records → sum of the latest 12.
  - 1–11 records       → sum / count · 12  (scaled to a 12-period year).
  - empty series       → 0.0; callers treat this as "no data" and do not
                         run the simulator.
"""

from __future__ import annotations

from energy_readiness.models.consumption import ConsumptionSeries

PERIODS_PER_YEAR = 12


def annualize_consumption(series: ConsumptionSeries) -> float:
    """Return the annualized kWh estimate for ``series``."""
    values = series.values
    if not values:
        return 0.0

    latest = values[-PERIODS_PER_YEAR:]
    total = sum(latest)
    if len(values) < PERIODS_PER_YEAR:
        return total / len(values) * PERIODS_PER_YEAR
    return total
