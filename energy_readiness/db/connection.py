"""
SQLite connections for the readiness-score slot.

``get_connection()`` is a context manager: the transaction commits when the
block exits cleanly and rolls back if it raises. The slot table is created
on open (``apply_schema=True``), so a fresh path needs no ``init-db`` first.

``open_score_db()`` is the same thing driven by the ``[database]`` settings.

Usage::

    with open_score_db(config.database) as conn:
        ReadinessScoreRepository(conn).set(80)
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from energy_readiness.db import schema

if TYPE_CHECKING:
    from energy_readiness.config import DatabaseConfig

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


def _prepare(conn: sqlite3.Connection, wal_mode: bool, busy_timeout_ms: int, in_memory: bool) -> None:
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)};")
    # WAL needs a real file
    if wal_mode and not in_memory:
        conn.execute("PRAGMA journal_mode = WAL;")


@contextmanager
def get_connection(
    db_path: str,
    wal_mode: bool = True,
    busy_timeout_ms: int = 5000,
    apply_schema: bool = True,
) -> Iterator[sqlite3.Connection]:
    """Yield an open connection to ``db_path``.

    Args:
        db_path: Database file (parent directories are created) or ``":memory:"``.
        wal_mode: Switch file databases to WAL journaling.
        busy_timeout_ms: Wait this long on a locked database before failing.
        apply_schema: Create the slot table when missing.

    Raises:
        sqlite3.OperationalError: If the database cannot be opened or stays locked.
    """
    in_memory = db_path == MEMORY_DB
    if not in_memory:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=busy_timeout_ms / 1000)
    try:
        _prepare(conn, wal_mode, busy_timeout_ms, in_memory)
        if apply_schema:
            schema.apply_schema(conn)
        yield conn
    except Exception:
        logger.debug("Rolling back transaction on %s", db_path)
        conn.rollback()
        raise
    else:
        conn.commit()
    finally:
        conn.close()


def open_score_db(config: "DatabaseConfig", db_path: str | None = None):
    """``get_connection()`` using the ``[database]`` settings.

    Args:
        config:  Database section of ``AppConfig``.
        db_path: Overrides ``config.db_path`` when given.
    """
    return get_connection(
        db_path or config.db_path,
        wal_mode=config.wal_mode,
        busy_timeout_ms=config.busy_timeout_ms,
    )
