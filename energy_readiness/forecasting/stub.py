"""
Integration point for an external demand-forecasting service.

The planned backend is a SARIMAX model served over HTTP that returns the
next 1-36 months of consumption. It is not connected yet: ``forecast()``
validates its inputs and then raises ``NotImplementedError`` with a message
the CLI can show as-is. No network call is attempted.

``placeholder_forecast()`` is an explicit opt-in for demos: it extends the
last observed value by 1 % per step (``last · (1 + 0.01·i)``, rounded half
up). It is not a model and nothing else in the package consumes it.

Readiness scoring, scenarios and recommendations do not depend on this
module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from energy_readiness.models.consumption import ConsumptionSeries
from energy_readiness.utils.numeric import round_half_up

logger = logging.getLogger(__name__)

MIN_STEPS = 1
MAX_STEPS = 36
PLACEHOLDER_STEP_GROWTH = 0.01


@dataclass(frozen=True)
class ForecastPoint:
    period: str
    kwh: float


def _check_request(series: ConsumptionSeries, steps: int) -> None:
    if series.is_empty:
        raise ValueError("No consumption data loaded; import a file before forecasting.")
    if not MIN_STEPS <= steps <= MAX_STEPS:
        raise ValueError(
            f"steps must be between {MIN_STEPS} and {MAX_STEPS}, got {steps}."
        )


def placeholder_forecast(series: ConsumptionSeries, steps: int = 12) -> list[ForecastPoint]:
    """Project ``steps`` periods from the last record at +1 % per step.

    Raises:
        ValueError: If the series is empty or ``steps`` is outside 1-36.
    """
    _check_request(series, steps)
    last = series.values[-1]
    points = [
        ForecastPoint(
            period=f"Forecast +{i}",
            kwh=float(round_half_up(last * (1 + PLACEHOLDER_STEP_GROWTH * i))),
        )
        for i in range(1, steps + 1)
    ]
    logger.info("Placeholder projection: %d step(s) from last value %.0f kWh", steps, last)
    return points


class ForecastClient:
    """Client stub for the forecasting service.

    Attributes:
        endpoint: Base URL of the service, if one has been configured.
    """

    model_name = "sarimax"

    def __init__(self, endpoint: Optional[str] = None) -> None:
        self.endpoint = endpoint

    def forecast(self, series: ConsumptionSeries, steps: int = 12) -> list[ForecastPoint]:
        """Request ``steps`` future periods for ``series``.

        Raises:
            ValueError: If the series is empty or ``steps`` is outside 1-36.
            NotImplementedError: Always, once inputs are valid; the service
                is not connected.
        """
        _check_request(series, steps)

        target = self.endpoint or "<no endpoint configured>"
        logger.warning(
            "Forecast requested for %d step(s) but the %s service is not connected (%s)",
            steps, self.model_name, target,
        )
        raise NotImplementedError(
            f"The {self.model_name.upper()} forecasting service is not connected yet "
            f"(endpoint: {target}). Readiness scoring, scenarios and recommendations "
            "are available without it."
        )
