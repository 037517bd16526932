"""
Planning pipeline.

planner : PlanningOutcome + run_planning(): scoring, simulation and
          recommendation in one pass with an explicit score hand-off.
"""
