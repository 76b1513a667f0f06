"""Logger factory shared by the engine modules."""
from __future__ import annotations

import logging
import os

_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger with a stream handler and env-driven level.

    The level comes from ``TRIP_ENGINE_LOG_LEVEL`` (default ``INFO``). Loggers
    do not propagate so that host applications embedding the engine don't see
    every record twice.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    level = os.getenv("TRIP_ENGINE_LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    logger.propagate = False
    return logger
