"""
Recommendation engine: picks a coverage scenario from the readiness score
and explains the choice.

Modules
-------
selector : RecommendationResult + select_recommendation() + build_rationale()
           + best_by_savings(): pure functions, no DB or I/O.
reporter : write_scenarios_csv() + write_planning_json(): file output.
"""
