"""
Logging configuration for the SlideSmith proxy server.

The standard-library loggers used by uvicorn, FastAPI and httpx go through
``dictConfig``; SlideSmith's own modules log through loguru.
"""

import logging.config
import os
import sys
from typing import Any

from loguru import logger as loguru_logger

from slidesmith.configs.config import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    log_dir: str | None = None,
) -> None:
    """Configure server logging; ``log_file`` adds a rotating file sink."""
    log_level = (log_level or config.log_level).upper()

    handlers: dict[str, Any] = {
        "console": {
            "level": log_level,
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        }
    }
    log_path = None
    if log_file:
        log_path = os.path.join(log_dir or config.log_dir, log_file)
        os.makedirs(os.path.dirname(log_path), exist_ok=True)
        handlers["file"] = {
            "level": "DEBUG",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_path,
            "maxBytes": 10485760,
            "backupCount": 5,
            "formatter": "standard",
        }

    def _logger(level: str) -> dict[str, Any]:
        return {"level": level, "handlers": list(handlers), "propagate": False}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"}
            },
            "handlers": handlers,
            "loggers": {
                "uvicorn": _logger(log_level),
                "fastapi": _logger(log_level),
                # httpx logs full request URLs at INFO
                "httpx": _logger("WARNING"),
            },
        }
    )

    loguru_logger.remove()
    loguru_logger.add(sys.stdout, level=log_level)
    if log_path:
        loguru_logger.add(
            log_path,
            level="DEBUG",
            rotation="10 MB",
            retention=5,
            backtrace=False,
            diagnose=False,
        )
