"""
Logging Utilities

Console logging setup for the root logger. Modules log through
``logging.getLogger(__name__)``; this only decides where records go and
at which level.
"""

import logging
import sys
from typing import Optional

from config.settings import get_settings
from constants import LoggingDefaults

# Marker attribute so repeated configure_logging calls don't stack handlers
_HANDLER_MARKER = '_entity_service_handler'


def configure_logging(level: Optional[str] = None) -> logging.Handler:
    """
    Attach a stdout handler to the root logger.

    Calling this more than once only updates the level of the existing handler.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to the configured ENTITY_SERVICE_LOG_LEVEL.

    Returns:
        The console handler attached to the root logger
    """
    if level is None:
        level = get_settings().log_level

    root_logger = logging.getLogger()
    numeric_level = logging.getLevelName(level.upper())

    for handler in root_logger.handlers:
        if getattr(handler, _HANDLER_MARKER, False):
            handler.setLevel(numeric_level)
            root_logger.setLevel(numeric_level)
            return handler

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LoggingDefaults.FORMAT))
    console_handler.setLevel(numeric_level)
    setattr(console_handler, _HANDLER_MARKER, True)

    root_logger.setLevel(numeric_level)
    root_logger.addHandler(console_handler)
    return console_handler
