import logging
from logging.config import dictConfig
from typing import Any, Optional

from glucosmart.core.settings import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def build_logging_config(config: LoggingConfig) -> dict[str, Any]:
    level = config.level
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%dT%H:%M:%S%z"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "structured", "level": level},
        },
        "loggers": {
            "glucosmart": {"level": level},
            # Dose requests are not echoed into access logs unless asked for.
            "uvicorn.access": {
                "handlers": ["console"] if config.access_log else [],
                "level": level if config.access_log else "WARNING",
                "propagate": False,
            },
            "uvicorn.error": {"level": level},
            "apscheduler": {"level": "WARNING"},
        },
        "root": {"handlers": ["console"], "level": level},
    }


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    config = config or LoggingConfig()
    dictConfig(build_logging_config(config))
    logging.getLogger(__name__).debug("Logging configured at %s (access log: %s)", config.level, config.access_log)


__all__ = ["build_logging_config", "configure_logging"]
