"""
Repository for the single readiness-score slot.

Absent and zero are different states: ``get()`` returns ``None`` when the
slot has never been written, was cleared, or holds text that does not parse
to a finite number; a stored ``"0"`` reads back as ``0.0``.

The repository never commits; the connection context manager owns the
transaction.
"""

from __future__ import annotations

import logging
import math
import sqlite3
from typing import Any, Optional

from energy_readiness.db.schema import SLOT_TABLE

logger = logging.getLogger(__name__)

_SELECT = f"SELECT score_text FROM {SLOT_TABLE} WHERE slot_id = 1;"
_UPSERT = f"""
    INSERT INTO {SLOT_TABLE} (slot_id, score_text, updated_at)
    VALUES (1, ?, strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
    ON CONFLICT(slot_id) DO UPDATE SET
        score_text = excluded.score_text,
        updated_at = excluded.updated_at;
"""
_DELETE = f"DELETE FROM {SLOT_TABLE} WHERE slot_id = 1;"


def encode_score(score: float) -> str:
    """Slot text for ``score``: ``"80"`` for whole numbers, ``"72.5"`` otherwise."""
    value = float(score)
    return str(int(value)) if value.is_integer() else repr(value)


def decode_score(text: Any) -> Optional[float]:
    """Parse slot text; ``None`` when it is not a finite number."""
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


class ReadinessScoreRepository:
    """Read/write access to ``readiness_score_slot`` (last write wins).

    Attributes:
        conn: Open connection, normally from ``get_connection()``.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def _run(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        logger.debug("SQL: %s | params: %s", " ".join(sql.split()), params)
        return self.conn.execute(sql, params)

    def get(self) -> Optional[float]:
        """Return the stored score, or ``None`` when absent or unreadable."""
        row = self._run(_SELECT).fetchone()
        if row is None:
            return None
        value = decode_score(row["score_text"])
        if value is None:
            logger.warning("Ignoring unreadable stored readiness score: %r", row["score_text"])
        return value

    def set(self, score: float) -> None:
        """Overwrite the slot with ``score``."""
        text = encode_score(score)
        self._run(_UPSERT, (text,))
        logger.info("Stored readiness score: %s", text)

    def clear(self) -> bool:
        """Empty the slot. Returns True if a score was removed."""
        return self._run(_DELETE).rowcount > 0
