from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any

from asgi_correlation_id.context import correlation_id
from pythonjsonlogger import jsonlogger

JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s %(correlation_id)s"
PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Loggers that keep their own handler list instead of propagating to root.
SERVER_LOGGERS = ("uvicorn.error", "uvicorn.access")


class CorrelationIdFilter(logging.Filter):
    """Attach the current request correlation ID to each log record.

    Outside an HTTP request (CLI runs, lifecycle hooks) there is no ID.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get() or "-"
        return True


def build_config(level: str, json_output: bool = True) -> dict[str, Any]:
    """Return the ``dictConfig`` mapping for one stderr handler."""
    if json_output:
        formatter: dict[str, Any] = {"()": jsonlogger.JsonFormatter, "fmt": JSON_FIELDS}
    else:
        formatter = {"format": PLAIN_FORMAT}

    loggers: dict[str, Any] = {"sasscmd": {"level": level}}
    for name in SERVER_LOGGERS:
        loggers[name] = {"handlers": ["stderr"], "level": level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"correlation": {"()": CorrelationIdFilter}},
        "formatters": {"default": formatter},
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "default",
                "filters": ["correlation"],
            }
        },
        "root": {"handlers": ["stderr"], "level": level},
        "loggers": loggers,
    }


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Route every logger through one stream handler.

    The service logs JSON lines; the CLI passes ``json_output=False`` to get
    short human-readable lines.
    """
    dictConfig(build_config(level, json_output))
