"""
Consumption file import: CSV, Excel, or JSON rows → ``ConsumptionSeries``.

Supported formats (detected by extension):
  .csv          comma-delimited with a header row (UTF-8, BOM tolerated)
  .xlsx / .xls  first worksheet, header in the first row (read with pandas)
  .json         array of row objects

Column resolution
-----------------
Header names vary between billing exports, so the two required roles are
resolved through ``COLUMN_SYNONYMS``: headers are compared case-insensitively
and the first synonym (in table order) present in the file wins.

  period  ← date, month
  kwh     ← kwh, kw h, consumption, usage

Row rules
---------
- kWh cells are coerced to float; blank or malformed text becomes 0.
- A row is discarded when its period is blank or its kWh is not > 0.
- Surviving rows keep their file order (assumed chronological).

Every import produces validation notes suitable for showing next to a
preview table, e.g. "Missing required column: 'kwh' ..." or
"12 row(s) have no kWh value.".
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from energy_readiness.models.consumption import ConsumptionRecord, ConsumptionSeries
from energy_readiness.utils.numeric import coerce_float

logger = logging.getLogger(__name__)

COLUMN_SYNONYMS: dict[str, tuple[str, ...]] = {
    "period": ("date", "month"),
    "kwh":    ("kwh", "kw h", "consumption", "usage"),
}

SUPPORTED_SUFFIXES = frozenset({".csv", ".xlsx", ".xls", ".json"})

_MISSING_COLUMN_NOTES: dict[str, str] = {
    "period": "Missing required column: 'date' (or 'Date'/'month').",
    "kwh":    "Missing required column: 'kwh' (or 'KWH'/'consumption'/'usage').",
}

FILE_OK_NOTE = "File looks good. Ready for analysis."


@dataclass
class IngestionResult:
    """Outcome of normalizing a batch of raw rows.

    Attributes:
        series:         Usable records, in source order.
        columns:        Header names exactly as found in the source.
        period_column:  Resolved period header, or None if absent.
        kwh_column:     Resolved kWh header, or None if absent.
        total_rows:     Data rows read (header excluded).
        discarded_rows: Rows dropped by the period / kWh rules.
        notes:          Human-readable validation notes (never empty).
    """

    series: ConsumptionSeries
    columns: list[str]
    period_column: Optional[str]
    kwh_column: Optional[str]
    total_rows: int
    discarded_rows: int
    notes: list[str] = field(default_factory=list)

    @property
    def is_usable(self) -> bool:
        """False when a required column could not be resolved."""
        return self.period_column is not None and self.kwh_column is not None

    @property
    def has_data(self) -> bool:
        return not self.series.is_empty


def resolve_columns(columns: list[str]) -> dict[str, Optional[str]]:
    """Map each role in ``COLUMN_SYNONYMS`` to the matching header, or None.

    Matching is case-insensitive and whitespace-trimmed. Synonyms are tried in
    table order; when several headers match the same synonym the leftmost one
    is used.
    """
    lowered: dict[str, str] = {}
    for col in columns:
        lowered.setdefault(str(col).strip().lower(), col)

    resolved: dict[str, Optional[str]] = {}
    for role, synonyms in COLUMN_SYNONYMS.items():
        resolved[role] = next((lowered[s] for s in synonyms if s in lowered), None)
    return resolved


def normalize_rows(
    rows: list[dict[str, Any]],
    columns: Optional[list[str]] = None,
) -> IngestionResult:
    """Apply column resolution and the discard rules to in-memory rows.

    Args:
        rows:    Row dicts keyed by header name.
        columns: Header order; defaults to the keys of the first row.

    Returns:
        An ``IngestionResult``. When a required column is missing the series
        is empty and the notes say which column is missing.
    """
    if columns is None:
        columns = [str(c) for c in rows[0].keys()] if rows else []

    resolved = resolve_columns(columns)
    period_col = resolved["period"]
    kwh_col = resolved["kwh"]

    notes: list[str] = [
        _MISSING_COLUMN_NOTES[role] for role, col in resolved.items() if col is None
    ]
    if not rows:
        notes.append("No rows read from file. Check the format.")

    records: list[ConsumptionRecord] = []
    discarded = 0
    blank_kwh = 0
    blank_period = 0

    if period_col is not None and kwh_col is not None:
        for row in rows:
            raw_kwh = row.get(kwh_col)
            period = _cell_text(row.get(period_col))
            if _is_blank(raw_kwh):
                blank_kwh += 1
            if not period:
                blank_period += 1

            kwh = coerce_float(raw_kwh)
            if not period or kwh <= 0:
                discarded += 1
                continue
            records.append(ConsumptionRecord(period=period, kwh=kwh))

    if blank_kwh:
        notes.append(f"{blank_kwh} row(s) have no kWh value.")
    if blank_period:
        notes.append(f"{blank_period} row(s) have no date value.")
    if discarded:
        logger.warning(
            "Discarded %d of %d row(s) with a blank period or non-positive kWh",
            discarded, len(rows),
        )
    if not notes:
        notes.append(FILE_OK_NOTE)

    return IngestionResult(
        series=ConsumptionSeries(records=tuple(records)),
        columns=list(columns),
        period_column=period_col,
        kwh_column=kwh_col,
        total_rows=len(rows),
        discarded_rows=discarded,
        notes=notes,
    )


def load_consumption_file(path: Path) -> IngestionResult:
    """Read a consumption export and normalize it.

    Args:
        path: Path to a ``.csv``, ``.xlsx``, ``.xls`` or ``.json`` file.

    Returns:
        ``IngestionResult`` for the file's rows.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the format is unsupported or the file has no header /
            is not a JSON array of objects.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Consumption file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported file format '{suffix}'. "
            f"Use one of: {', '.join(sorted(SUPPORTED_SUFFIXES))}."
        )

    if suffix == ".csv":
        columns, rows = _read_csv(path)
    elif suffix == ".json":
        columns, rows = _read_json(path)
    else:
        columns, rows = _read_excel(path)

    result = normalize_rows(rows, columns)
    logger.info(
        "Loaded %d usable record(s) from %s (%d row(s) read, %d discarded)",
        len(result.series), path.name, result.total_rows, result.discarded_rows,
    )
    return result


# ── Private helpers ────────────────────────────────────────────────────────────

def _read_csv(path: Path) -> tuple[list[str], list[dict[str, Any]]]:
    with open(path, encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")
        columns = list(reader.fieldnames)
        rows = list(reader)
    return columns, rows


def _read_json(path: Path) -> tuple[list[str], list[dict[str, Any]]]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"JSON parse error in {path.name}: {exc}") from exc

    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise ValueError(f"JSON consumption file must contain an array of objects: {path}")

    columns = [str(c) for c in data[0].keys()] if data else []
    return columns, data


def _read_excel(path: Path) -> tuple[list[str], list[dict[str, Any]]]:
    df = pd.read_excel(path, sheet_name=0, dtype=object)
    df.columns = [str(c) for c in df.columns]
    df = df.astype(object).where(df.notna(), None)
    return list(df.columns), df.to_dict(orient="records")


def _cell_text(value: Any) -> str:
    """Render a period cell as a stripped string ('' for blank)."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
