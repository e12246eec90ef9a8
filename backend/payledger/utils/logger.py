"""
Application Logger — console and file logging for the payments backend.

Usage:
    from payledger.utils.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Payment stored in ledger")
"""
import logging
import os
import sys
from logging import Logger
from typing import Optional

from payledger.config import Settings, get_settings

ROOT_LOGGER_NAME = "payledger"

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(settings: Optional[Settings] = None) -> Logger:
    """Attach handlers to the application logger once."""
    settings = settings or get_settings()
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    # Prevent duplicate handlers on uvicorn reload
    if logger.handlers:
        return logger

    logger.setLevel(settings.LOG_LEVEL.upper())
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    try:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(settings.LOG_DIR, "server.log"), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(f"File logging disabled, cannot write to {settings.LOG_DIR}: {e}")

    logger.propagate = False
    return logger


def get_logger(name: str) -> Logger:
    """Child logger under the application namespace."""
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
