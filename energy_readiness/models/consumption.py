"""
Consumption input models.

``ConsumptionRecord`` is one normalized billing period: a non-empty period
label and a strictly positive, finite kWh value. Rows that cannot satisfy
this are discarded by the ingestion layer before a record is ever built, so
the scoring core can rely on every record being usable.

``ConsumptionSeries`` is an ordered, immutable collection of records. Order
is taken to be chronological; it is not checked.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, field_validator


class ConsumptionRecord(BaseModel):
    """A single period of metered electricity consumption.

    Attributes:
        period: Period label as it appeared in the source (``"2024-01"``,
            ``"Jan 2024"``, ...). Stripped; never empty.
        kwh:    Consumption for the period in kWh; finite and > 0.
    """

    model_config = ConfigDict(frozen=True)

    period: str
    kwh: float

    @field_validator("period")
    @classmethod
    def validate_period_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("period must not be empty.")
        return v.strip()

    @field_validator("kwh")
    @classmethod
    def validate_kwh_positive(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError(f"kwh must be a finite value > 0, got {v}.")
        return v


class ConsumptionSeries(BaseModel):
    """Ordered sequence of ``ConsumptionRecord`` (oldest first)."""

    model_config = ConfigDict(frozen=True)

    records: tuple[ConsumptionRecord, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, float]]) -> "ConsumptionSeries":
        """Build a series from ``(period, kwh)`` tuples; invalid pairs raise."""
        return cls(
            records=tuple(ConsumptionRecord(period=p, kwh=k) for p, k in pairs)
        )

    @property
    def values(self) -> list[float]:
        return [r.kwh for r in self.records]

    @property
    def is_empty(self) -> bool:
        return not self.records

    def __len__(self) -> int:
        return len(self.records)
