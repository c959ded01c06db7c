"""
Game Core - Logging Configuration

Applies the configured log level to the root logger.
"""

import logging

from gamecore.config.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from settings (or an explicit level name)."""
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    if settings.debug and level is None:
        level_name = "DEBUG"

    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level {level_name!r}")

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger("gamecore").setLevel(numeric_level)
