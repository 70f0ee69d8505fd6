"""Structured logging setup.

JSON lines for hosts (default), plain text for local development. Level and
format come from the `logging` config section.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from modsel.config.schemas.observability import LoggingConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Extra attributes copied into JSON records when present.
_EXTRA_FIELDS = ("session_id", "module_id", "error_type")


class JSONFormatter(logging.Formatter):
    """Output log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        return json.dumps(entry)


def configure_logging(
    cfg: Optional[LoggingConfig] = None,
    stream=None,
) -> logging.Logger:
    """Install one handler on the ``modsel`` logger tree.

    Only the package logger is touched so embedding hosts keep their own
    root configuration. Calling again replaces the previous handler.
    """
    cfg = cfg or LoggingConfig()
    log = logging.getLogger("modsel")
    log.setLevel(_LEVELS.get(cfg.level, logging.INFO))
    for h in list(log.handlers):
        if getattr(h, "_modsel_handler", False):
            log.removeHandler(h)
    handler = logging.StreamHandler(stream or sys.stdout)
    if cfg.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    handler._modsel_handler = True  # type: ignore[attr-defined]
    log.addHandler(handler)
    return log
