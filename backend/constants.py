"""
Application-wide constants and configuration keys.

This module centralizes the magic strings and defaults used throughout the
application to improve maintainability and reduce duplication.
"""
from enum import Enum
from pathlib import Path


class NotificationKind(str, Enum):
    """
    Kinds of events a result stream can deliver.

    A stream delivers at most one NEXT, always followed by exactly one
    terminal event (ERROR or COMPLETE).
    """

    NEXT = 'NEXT'
    ERROR = 'ERROR'
    COMPLETE = 'COMPLETE'

    @classmethod
    def is_terminal(cls, kind: 'NotificationKind') -> bool:
        """Check if this kind ends the stream"""
        return kind in [cls.ERROR, cls.COMPLETE]


class SettingKeys:
    """Environment variable names read by config.settings"""

    DATABASE_URL = 'ENTITY_SERVICE_DATABASE_URL'
    SQL_ECHO = 'ENTITY_SERVICE_SQL_ECHO'
    LOG_LEVEL = 'ENTITY_SERVICE_LOG_LEVEL'


class DatabaseDefaults:
    """Default database configuration"""

    DB_DIR = Path.home() / ".entity_service"
    DB_PATH = DB_DIR / "entities.db"
    URL = f'sqlite:///{DB_PATH}'
    POOL_PRE_PING = True
    POOL_RECYCLE = 3600  # Recycle connections after 1 hour


class LoggingDefaults:
    """Default logging configuration"""

    LEVEL = 'INFO'
    FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    VALID_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


TRUTHY_VALUES = ('true', '1', 'yes')
