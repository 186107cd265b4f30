"""Logging configuration shared by every entry point."""

import logging

from .config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings | None = None) -> None:
    """Install the root handler using the configured level."""
    settings = settings or get_settings()

    if settings.log_level:
        level = logging.getLevelName(settings.log_level.upper())
    else:
        level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)

    # SQL echo is controlled by the engine, keep the logger itself quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
