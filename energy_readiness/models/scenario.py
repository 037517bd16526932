"""
User-adjustable scenario inputs.

``ScenarioParameters`` performs no range validation: zero or
negative rates and costs are legal and flow through the simulator
arithmetically (a negative rate gives negative savings and therefore no
payback). Malformed values (blank text, ``None``, NaN) are coerced to
``0.0`` instead of raising, so a half-filled form still produces output.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from energy_readiness.utils.numeric import coerce_float


class ScenarioParameters(BaseModel):
    """Financial and environmental inputs for the coverage scenarios.

    Attributes:
        rate_per_unit:       Electricity tariff per kWh (currency units).
        system_cost:         Upfront cost of the renewable installation.
        co2_factor_per_unit: Grid emission factor in kg CO2 per kWh.
    """

    model_config = ConfigDict(frozen=True)

    rate_per_unit: float = 12.0
    system_cost: float = 1_500_000.0
    co2_factor_per_unit: float = 0.7

    @field_validator("rate_per_unit", "system_cost", "co2_factor_per_unit", mode="before")
    @classmethod
    def coerce_malformed_to_zero(cls, v: Any) -> float:
        return coerce_float(v)
