"""Logging setup for the CLI, driven by log_level / log_format config."""

from __future__ import annotations

import json
import logging

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(level: str = "info", fmt: str = "text") -> None:
    """Attach a stderr handler to the ``rolebaker`` logger."""
    logger = logging.getLogger("rolebaker")
    logger.setLevel(_LEVELS.get(level, logging.INFO))

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    # Re-running the CLI callback in one process must not stack handlers.
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
