"""Country API - Structured JSON Logging.

One JSON object per line on stdout. Loggers live under the ``country_api.``
namespace; ``configure_server_logging`` puts uvicorn's loggers on the same
format so access and application logs can be parsed together.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Iterable

from country_api.config import settings

ROOT_LOGGER = "country_api"

# ``extra=`` keys copied into the JSON line when present
EXTRA_FIELDS = ("endpoint", "source", "status_code", "duration_ms")


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        for key in EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        return json.dumps(entry, default=str)


def _level() -> int:
    return getattr(logging, settings.log_level.upper(), logging.INFO)


def _json_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return ``country_api.<name>``; the handler sits on the package root logger."""
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        root.addHandler(_json_handler())
        root.propagate = False
    root.setLevel(_level())
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_server_logging(
    names: Iterable[str] = ("uvicorn", "uvicorn.error", "uvicorn.access"),
) -> None:
    """Switch the server's own loggers to JSON output."""
    for name in names:
        logger = logging.getLogger(name)
        logger.handlers = [_json_handler()]
        logger.setLevel(_level())
        logger.propagate = False
