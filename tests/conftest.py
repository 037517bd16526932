"""
Shared pytest fixtures for the energy readiness test suite.

Provides:
  - ``in_memory_db``: fresh in-memory SQLite connection with the schema applied.
  - Sample consumption series (flat, trending, empty) and default
    ``ScenarioParameters``.
  - ``make_series``: factory building a series from a list of kWh values.
"""

from __future__ import annotations

import sqlite3
from typing import Callable, Generator

import pytest

from energy_readiness.db.schema import apply_schema
from energy_readiness.models.consumption import ConsumptionRecord, ConsumptionSeries
from energy_readiness.models.scenario import ScenarioParameters


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the schema applied."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    apply_schema(conn)
    yield conn
    conn.close()


# ── Series factories ──────────────────────────────────────────────────────────

def _series(values: list[float]) -> ConsumptionSeries:
    return ConsumptionSeries(
        records=tuple(
            ConsumptionRecord(period=f"2024-{i + 1:02d}" if i < 12 else f"m{i + 1}", kwh=v)
            for i, v in enumerate(values)
        )
    )


@pytest.fixture
def make_series() -> Callable[[list[float]], ConsumptionSeries]:
    """Factory: ``make_series([100, 120])`` → series with synthetic period labels."""
    return _series


@pytest.fixture
def flat_series() -> ConsumptionSeries:
    """Four identical months; scores exactly 80 (HIGH)."""
    return _series([100.0, 100.0, 100.0, 100.0])


@pytest.fixture
def alternating_series() -> ConsumptionSeries:
    """100/120 alternating; scores 68 (MEDIUM)."""
    return _series([100.0, 120.0, 100.0, 120.0])


@pytest.fixture
def empty_series() -> ConsumptionSeries:
    return ConsumptionSeries()


@pytest.fixture
def default_params() -> ScenarioParameters:
    """Rate 12/kWh, cost 1.5M, 0.7 kg CO2/kWh."""
    return ScenarioParameters(rate_per_unit=12.0, system_cost=1_500_000.0, co2_factor_per_unit=0.7)
