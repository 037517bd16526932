"""
Scenario simulation.

simulator : Scenario dataclass + COVERAGE_FRACTIONS + simulate_scenarios()
            + simulate_for_series().
"""
