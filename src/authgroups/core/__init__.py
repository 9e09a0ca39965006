"""Core AuthGroups utilities.

This module exports configuration and logging helpers.
"""

from authgroups.core.config import Settings, TableSettings, get_settings
from authgroups.core.logging import (
    LoggingContext,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "TableSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
]
