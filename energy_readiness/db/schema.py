"""
SQLite schema for persisted state.

The only persisted state is the last known readiness score: one row at
most (``slot_id = 1``, enforced by a CHECK), overwritten on every write.
The score is stored as text exactly as written; no history is kept.

``apply_schema()`` uses ``IF NOT EXISTS`` and is idempotent.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

SLOT_TABLE = "readiness_score_slot"

_DDL_READINESS_SCORE_SLOT = f"""
CREATE TABLE IF NOT EXISTS {SLOT_TABLE} (
    slot_id     INTEGER PRIMARY KEY CHECK (slot_id = 1),
    score_text  TEXT    NOT NULL,
    updated_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
"""

ALL_TABLE_NAMES: tuple[str, ...] = (SLOT_TABLE,)


def apply_schema(conn: sqlite3.Connection) -> None:
    """Create all tables if they do not already exist."""
    conn.execute(_DDL_READINESS_SCORE_SLOT)
    logger.debug("Schema applied: %s", ", ".join(ALL_TABLE_NAMES))


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return the names of all user tables in the database."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' "
        "AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    ).fetchall()
    return [r[0] for r in rows]
