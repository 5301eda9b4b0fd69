"""Logging configuration utilities."""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

from socialhub.settings import get_settings

LOGS_DIR = Path("logs")


def get_logging_config() -> Dict[str, Any]:
    """
    Get logging configuration dictionary.

    Returns:
        Logging configuration for dictConfig
    """
    settings = get_settings()
    formatter = "json" if settings.log_format == "json" else "standard"
    level = settings.log_level.upper()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "class": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": formatter,
                "filename": str(LOGS_DIR / "socialhub.log"),
                "maxBytes": 10485760,
                "backupCount": 10,
            },
            "celery_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": formatter,
                "filename": str(LOGS_DIR / "celery.log"),
                "maxBytes": 10485760,
                "backupCount": 10,
            },
        },
        "loggers": {
            "socialhub": {
                "level": level,
                "handlers": ["console", "file"],
                "propagate": False,
            },
            "celery": {
                "level": level,
                "handlers": ["console", "celery_file"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "redis": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


def setup_logging() -> None:
    """Setup logging configuration."""
    LOGS_DIR.mkdir(exist_ok=True)
    logging.config.dictConfig(get_logging_config())

    logger = logging.getLogger("socialhub")
    logger.info("Logging configured successfully")
