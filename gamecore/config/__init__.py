"""
Game Core Configuration.

Environment variables, settings, and logging configuration.
"""

from gamecore.config.log_setup import configure_logging
from gamecore.config.settings import Settings, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
