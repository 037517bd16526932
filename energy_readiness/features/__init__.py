"""Feature engineering for consumption series.

Modules
-------
consumption_features : FeatureSet + extract_features() + summarize_consumption()
annualize            : annualize_consumption() (latest 12 periods or scaled)
"""
