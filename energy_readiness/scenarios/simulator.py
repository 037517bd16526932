"""
Renewable coverage scenarios.

Given an annualized kWh estimate and ``ScenarioParameters``, produce one
``Scenario`` for each coverage fraction in ``COVERAGE_FRACTIONS``, always in
that order.

Per scenario
------------
    energy_offset    = round(annual_kwh · coverage)
    annual_savings   = round(energy_offset · rate_per_unit)
    payback_years    = system_cost / annual_savings   if annual_savings > 0
                       None                           otherwise
    co2_reduced_tons = energy_offset · co2_factor_per_unit / 1000

Rounding is half-up to whole kWh / currency units. Payback is never zero-
divided and never infinite: no positive savings means no payback figure.
Negative or zero parameters are not rejected; they propagate through the
arithmetic. An offset or saving too large to represent (the product overflows
to infinity) is reported as 0, which leaves payback absent.

``simulate_for_series()`` is the guarded entry point for callers holding a
series: an empty series has no annual demand and yields ``None`` rather than
three all-zero rows.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from energy_readiness.features.annualize import annualize_consumption
from energy_readiness.models.consumption import ConsumptionSeries
from energy_readiness.models.scenario import ScenarioParameters
from energy_readiness.utils.numeric import round_half_up

logger = logging.getLogger(__name__)

COVERAGE_FRACTIONS: tuple[float, ...] = (0.30, 0.50, 0.70)


@dataclass(frozen=True)
class Scenario:
    """One renewable coverage option with its yearly figures.

    Attributes:
        coverage_fraction: Share of annual demand offset (0.30 / 0.50 / 0.70).
        label:             Display label, e.g. ``"50% Renewable"``.
        energy_offset:     kWh per year replaced by renewable supply.
        annual_savings:    Currency saved per year.
        payback_years:     Years to recover ``system_cost``; None when
                           ``annual_savings <= 0``.
        co2_reduced_tons:  Tonnes of CO2 avoided per year.
    """

    coverage_fraction: float
    label: str
    energy_offset: int
    annual_savings: int
    payback_years: Optional[float]
    co2_reduced_tons: float


def coverage_label(coverage: float) -> str:
    return f"{round_half_up(coverage * 100)}% Renewable"


def _whole(value: float, field: str, coverage: float) -> int:
    if not math.isfinite(value):
        logger.warning(
            "%s for %s overflowed (%s); reported as 0", field, coverage_label(coverage), value
        )
    return round_half_up(value)


def simulate_scenario(
    annual_kwh: float,
    coverage: float,
    params: ScenarioParameters,
) -> Scenario:
    """Compute the figures for a single coverage fraction."""
    energy_offset = _whole(annual_kwh * coverage, "Energy offset", coverage)
    annual_savings = _whole(energy_offset * params.rate_per_unit, "Annual savings", coverage)
    payback = params.system_cost / annual_savings if annual_savings > 0 else None
    co2_tons = energy_offset * params.co2_factor_per_unit / 1000.0

    return Scenario(
        coverage_fraction=coverage,
        label=coverage_label(coverage),
        energy_offset=energy_offset,
        annual_savings=annual_savings,
        payback_years=payback,
        co2_reduced_tons=co2_tons,
    )


def simulate_scenarios(
    annual_kwh: float,
    params: ScenarioParameters,
) -> list[Scenario]:
    """Return exactly one scenario per ``COVERAGE_FRACTIONS`` entry, in order.

    Args:
        annual_kwh: Annualized consumption estimate (kWh, >= 0).
        params:     Tariff, system cost and emission factor.
    """
    scenarios = [simulate_scenario(annual_kwh, c, params) for c in COVERAGE_FRACTIONS]
    logger.debug(
        "Simulated %d scenarios for %.0f kWh/yr (rate=%s, cost=%s, co2=%s)",
        len(scenarios), annual_kwh,
        params.rate_per_unit, params.system_cost, params.co2_factor_per_unit,
    )
    return scenarios


def simulate_for_series(
    series: ConsumptionSeries,
    params: ScenarioParameters,
) -> list[Scenario] | None:
    """Annualize ``series`` and simulate, or ``None`` if there is no data."""
    if series.is_empty:
        logger.warning("Scenario simulation skipped: consumption series is empty")
        return None
    return simulate_scenarios(annualize_consumption(series), params)
