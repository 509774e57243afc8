"""Logging setup for the API process."""

import logging

from deckframe.api.settings import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str = "deckframe") -> logging.Logger:
    """Attach a stream handler to the package logger, once."""
    logger = logging.getLogger(name)
    logger.setLevel(Config.log_level())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
