"""Process settings for the HTTP facade, read from the environment."""

import os
import logging

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class Config:
    """Application configuration loaded from environment variables"""

    ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

    # Empty means the level follows the environment
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "").upper()

    # Comma separated; "*" allows any origin (the drawing front end in dev)
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT == "production"

    @classmethod
    def log_level(cls) -> int:
        if cls.LOG_LEVEL:
            return LOG_LEVELS.get(cls.LOG_LEVEL, logging.INFO)
        return logging.INFO if cls.is_production() else logging.DEBUG

    @classmethod
    def validate(cls):
        """Validate configuration values"""
        if cls.LOG_LEVEL and cls.LOG_LEVEL not in LOG_LEVELS:
            logger.warning("Unknown LOG_LEVEL %r, falling back to INFO", cls.LOG_LEVEL)

        if cls.is_production() and "*" in cls.CORS_ORIGINS:
            logger.warning("CORS allows any origin - restrict CORS_ORIGINS in production!")

        if not cls.CORS_ORIGINS:
            logger.error("CORS_ORIGINS is set but lists no origins")
