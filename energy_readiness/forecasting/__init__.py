"""
Forecasting integration point.

stub : ForecastClient; validates inputs, then raises NotImplementedError.
"""
