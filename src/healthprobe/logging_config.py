"""Logging setup: informational lines to stdout, errors to stderr."""

import logging
import logging.config

LOG_FORMAT = "[HEALTHCHECK] %(message)s"


class MaxLevelFilter(logging.Filter):
    """Pass only records strictly below a given level."""

    def __init__(self, level: int | str) -> None:
        super().__init__()
        self.level = logging.getLevelName(level) if isinstance(level, str) else level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": LOG_FORMAT},
    },
    "filters": {
        "below_warning": {
            "()": MaxLevelFilter,
            "level": "WARNING",
        },
    },
    "handlers": {
        "stdout": {
            "formatter": "default",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
            "filters": ["below_warning"],
        },
        "stderr": {
            "formatter": "default",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "level": "WARNING",
        },
    },
    "loggers": {
        "healthprobe": {"handlers": ["stdout", "stderr"], "level": "INFO"},
    },
}


def configure_logging() -> None:
    """Install the [HEALTHCHECK] handlers on the healthprobe logger."""
    logging.config.dictConfig(LOG_CONFIG)
