"""Logging configuration for gymdesk."""

import logging
import logging.config

from .config import Settings, get_settings

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            "json_ensure_ascii": False,
        },
        "console": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "gymdesk": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
}


def build_logging_config(settings: Settings) -> dict:
    """Return a dictConfig mapping for the given settings."""
    config = {
        **LOGGING_CONFIG,
        "handlers": {
            "console": {
                **LOGGING_CONFIG["handlers"]["console"],
                "formatter": settings.log_format,
            },
        },
        "loggers": {
            "gymdesk": {
                **LOGGING_CONFIG["loggers"]["gymdesk"],
                "level": settings.log_level,
            },
        },
    }
    return config


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure logging for the application.

    Args:
        settings: Settings to configure from. Uses the cached process
            settings if not provided.

    Returns:
        The package logger.
    """
    if settings is None:
        settings = get_settings()

    logging.config.dictConfig(build_logging_config(settings))

    logger = logging.getLogger("gymdesk")
    logger.debug("Logging configured (level=%s, format=%s)", settings.log_level, settings.log_format)
    return logger
