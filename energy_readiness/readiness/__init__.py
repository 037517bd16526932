"""
Readiness scoring.

scorer : SubScores + compute_sub_scores() + classify_level()
         + compute_readiness(): pure functions, no DB or I/O.
"""
