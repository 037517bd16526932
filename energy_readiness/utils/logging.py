"""
Root-logger setup for CLI runs.

Modules never configure logging themselves; they call
``logging.getLogger(__name__)`` and the CLI calls ``configure_logging()``
once per command. Console output goes to stderr so report tables printed on
stdout stay clean.

``json_format = true`` switches both handlers to one JSON object per line.
Anything passed through ``extra=`` is carried as an additional key::

    {"time": "2026-03-01T08:00:00Z", "level": "INFO",
     "logger": "energy_readiness.readiness.scorer",
     "message": "Readiness scored: 80 (HIGH) from 4 record(s)"}
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from energy_readiness.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s | %(message)s"
ISO_UTC = "%Y-%m-%dT%H:%M:%SZ"

_QUIET_LOGGERS = ("openpyxl",)

# Keys present on every LogRecord; the rest arrived through extra=
_RECORD_KEYS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JsonLineFormatter(logging.Formatter):
    """Serialize a record to a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "time": time.strftime(ISO_UTC, time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(
            (k, v) for k, v in vars(record).items()
            if k not in _RECORD_KEYS and not k.startswith("_")
        )
        if record.exc_info:
            line["traceback"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def _text_formatter() -> logging.Formatter:
    formatter = logging.Formatter(TEXT_FORMAT, datefmt=ISO_UTC)
    formatter.converter = time.gmtime
    return formatter


def _handlers(config: "LoggingConfig") -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        path = Path(config.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def configure_logging(config: "LoggingConfig", debug: bool = False) -> None:
    """Install stderr (and optional file) handlers on the root logger.

    Args:
        config: ``[logging]`` section of the app settings.
        debug:  Log at DEBUG regardless of ``config.level``.

    Calling it again replaces the previous handlers.
    """
    level = logging.DEBUG if debug else logging.getLevelName(config.level)
    formatter = JsonLineFormatter() if config.json_format else _text_formatter()

    handlers = _handlers(config)
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
