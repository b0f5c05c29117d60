"""Core nestrule utilities.

This module exports the configuration and logging helpers shared by the engine.
"""

from nestrule.core.config import Settings, get_settings
from nestrule.core.logging import LoggingContext, configure_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
]
