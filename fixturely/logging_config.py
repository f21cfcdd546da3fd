"""
Logging setup for the API process.

Uvicorn's access log and the development request log both drop health
checks so polling load balancers do not flood the output.
"""

import logging
import logging.config
import re
from typing import Any, Dict

REQUEST_LOGGER = "fixturely.requests"

_HEALTH_CHECK = re.compile(r"\b(GET|HEAD) /health(\?| |$)")

_FORMATS = {
    "development": "%(levelname)-8s %(name)s: %(message)s",
    "production": "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s",
}


class HealthCheckFilter(logging.Filter):
    """Drop request-log lines for the /health endpoint."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name not in ("uvicorn.access", REQUEST_LOGGER):
            return True
        return not _HEALTH_CHECK.search(record.getMessage())


def get_logging_config(level: str = "INFO", environment: str = "development") -> Dict[str, Any]:
    """
    Build a dictConfig for the API process.

    Args:
        level: Level for the application and uvicorn loggers
        environment: Runtime environment; production logs carry timestamps and line numbers

    Returns:
        Dictionary accepted by logging.config.dictConfig and uvicorn's log_config
    """
    app_format = _FORMATS["production" if environment == "production" else "development"]

    def logger(handler: str) -> Dict[str, Any]:
        return {"handlers": [handler], "level": level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_check_filter": {"()": HealthCheckFilter}},
        "formatters": {
            "app": {"format": app_format},
            "request": {"format": "%(message)s"},
        },
        "handlers": {
            "app": {
                "class": "logging.StreamHandler",
                "formatter": "app",
                "stream": "ext://sys.stdout",
            },
            "request": {
                "class": "logging.StreamHandler",
                "formatter": "request",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
        },
        "loggers": {
            "uvicorn": logger("app"),
            "uvicorn.access": logger("request"),
            "fixturely": logger("app"),
            REQUEST_LOGGER: logger("request"),
        },
        "root": {"level": level, "handlers": ["app"]},
    }


def configure_logging(level: str = "INFO", environment: str = "development") -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level, environment))
