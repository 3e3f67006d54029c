"""Logging setup for the API process."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ["httpx", "httpcore", "openai", "groq"]


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure a console handler on the ``tablescout`` logger.

    Level comes from ``level`` or the LOG_LEVEL environment variable
    (default INFO). Safe to call more than once.
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logger = logging.getLogger("tablescout")
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
