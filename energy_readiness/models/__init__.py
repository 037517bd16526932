"""
Validated input models (pydantic, frozen).

consumption : ConsumptionRecord + ConsumptionSeries
scenario    : ScenarioParameters
"""
