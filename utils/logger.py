"""
Shared logger utility for the rental engine.
Provides a consistent logger configuration for the API and scripts; library
modules just use logging.getLogger(__name__) and inherit it.
"""

import logging
import os


def get_logger(name: str | None = None, level: str | int | None = None) -> logging.Logger:
    """
    Returns a logger with the specified name, configured with a standard format.
    The level comes from `level`, then RENTAL_LOG_LEVEL, then INFO.
    If no name is provided, returns the root logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    if level is None:
        level = os.getenv("RENTAL_LOG_LEVEL", "INFO").upper()
    logger.setLevel(level)
    return logger
