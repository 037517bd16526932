"""SQLite persistence for the readiness-score slot."""
