"""
Runtime Configuration

Settings are read from environment variables once and validated with
pydantic. Invalid values surface as ConfigurationError.

Variables:
- ENTITY_SERVICE_DATABASE_URL: SQLAlchemy database URL
- ENTITY_SERVICE_SQL_ECHO: 'true'/'1'/'yes' to echo SQL statements
- ENTITY_SERVICE_LOG_LEVEL: stdlib logging level name
"""
import os
import logging
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from constants import SettingKeys, DatabaseDefaults, LoggingDefaults, TRUTHY_VALUES
from exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Validated application settings."""

    database_url: str = Field(DatabaseDefaults.URL, description="SQLAlchemy database URL")
    sql_echo: bool = Field(False, description="Echo SQL statements to the log")
    log_level: str = Field(LoggingDefaults.LEVEL, description="Root logging level")

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v):
        if not v or not v.strip():
            raise ValueError("Database URL must not be empty")
        return v.strip()

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).strip().upper()
        if level not in LoggingDefaults.VALID_LEVELS:
            raise ValueError(
                f"Log level must be one of {', '.join(LoggingDefaults.VALID_LEVELS)}"
            )
        return level


def _is_truthy(value: Optional[str]) -> bool:
    return (value or '').strip().lower() in TRUTHY_VALUES


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Validated Settings instance

    Raises:
        ConfigurationError: If any value fails validation
    """
    env = os.environ if environ is None else environ
    values = {
        'sql_echo': _is_truthy(env.get(SettingKeys.SQL_ECHO)),
    }
    if env.get(SettingKeys.DATABASE_URL) is not None:
        values['database_url'] = env[SettingKeys.DATABASE_URL]
    if env.get(SettingKeys.LOG_LEVEL) is not None:
        values['log_level'] = env[SettingKeys.LOG_LEVEL]

    try:
        settings = Settings(**values)
    except ValidationError as e:
        invalid = [str(err['loc'][0]) for err in e.errors() if err.get('loc')]
        raise ConfigurationError(f"Invalid configuration: {e}", invalid_keys=invalid) from e

    logger.debug(f"Settings loaded (database={settings.database_url}, log_level={settings.log_level})")
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings, loading them on first use."""
    return load_settings()
