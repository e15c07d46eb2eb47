"""Logging configuration for the service process."""

from __future__ import annotations

import logging
from logging.config import dictConfig

from temple_hub.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger."""
    resolved = (level or settings.log_level).upper()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"level": resolved, "handlers": ["console"]},
            "loggers": {
                # SQL echo is controlled by SQL_DEBUG on the engine instead.
                "sqlalchemy.engine": {"level": logging.WARNING, "propagate": True},
            },
        }
    )
