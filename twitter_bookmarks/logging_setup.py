"""Logging configuration for the twitter-bookmarks CLI.

Logs go to stderr so stdout stays free for the result summary. Two formats:

- text: ``2026-10-18 23:30:00 [INFO] twitter_bookmarks.scraper: Stage: extract bookmark data``
- json: one object per line with timestamp, level, logger, message and extra fields

Named logging_setup.py so it does not shadow the stdlib logging module.
"""

import sys
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "twitter_bookmarks"

# Chatty third-party loggers and the lowest level they may emit at.
NOISY_LOGGERS = {"websockets": logging.INFO, "asyncio": logging.WARNING}


def context_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Structured fields attached by log_with_context, or {}."""
    fields = getattr(record, "extra", None)
    return fields if isinstance(fields, dict) else {}


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    DEBUG records also carry their source location.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = context_fields(record)
        if fields:
            entry["extra"] = fields

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if record.levelno <= logging.DEBUG:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Single-line text with context fields appended as ``[key=value ...]``."""

    LINE = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    DATE = "%Y-%m-%d %H:%M:%S"

    def __init__(self):
        super().__init__(fmt=self.LINE, datefmt=self.DATE)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = context_fields(record)
        if not fields:
            return line
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{line} [{rendered}]"


FORMATTERS = {"json": JSONFormatter, "text": TextFormatter}


def resolve_level(level: Optional[str], quiet: bool = False, verbose: bool = False) -> int:
    """Pick the effective level: --quiet, then --verbose, then level, then INFO."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    if level:
        return getattr(logging, level.upper(), logging.INFO)
    return logging.INFO


def setup_logging(
    format_type: str = "text",
    level: Optional[str] = None,
    quiet: bool = False,
    verbose: bool = False,
) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        format_type: "json" or "text"; anything else falls back to text
        level: Level name such as "DEBUG" or "warning"
        quiet: Only show errors
        verbose: Show debug output
    """
    log_level = resolve_level(level, quiet=quiet, verbose=verbose)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(FORMATTERS.get(format_type, TextFormatter)())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)

    logging.getLogger(PACKAGE_LOGGER).setLevel(log_level)
    for name, floor in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(log_level, floor))


def log_with_context(
    logger: logging.Logger, level: int, message: str, **fields: Any
) -> None:
    """Log message with structured fields rendered by both formatters.

    Example:
        log_with_context(logger, logging.INFO, "Bookmarks timeline ready", checks=3)
    """
    if not fields:
        logger.log(level, message, stacklevel=2)
        return
    # stacklevel=2 attributes the record to the caller, not this helper.
    logger.log(level, message, extra={"extra": fields}, stacklevel=2)
