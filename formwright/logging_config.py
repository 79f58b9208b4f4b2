# formwright/logging_config.py
"""
Stderr-only logging configuration.

stdout is reserved for command output (schema JSON, tables) so it stays
pipeable; every log line goes to stderr, as JSON or as plain text.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

VERBOSITY_LEVELS = {
    "quiet": logging.WARNING,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}

PLAIN_FORMAT = "%(asctime)s  %(levelname)-7s  %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON line."""
        log_data: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            log_data["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(verbosity: str = "normal", json_logs: bool = False) -> logging.Handler:
    """
    Send all logging to stderr.

    Clears existing root handlers so repeated calls do not double-log.

    Args:
        verbosity: quiet, normal or verbose
        json_logs: Emit JSON lines instead of plain text

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(VERBOSITY_LEVELS.get(verbosity, logging.INFO))

    # Per-request lines from httpx are noise outside verbose mode
    logging.getLogger("httpx").setLevel(
        logging.DEBUG if verbosity == "verbose" else logging.WARNING
    )
    return handler
