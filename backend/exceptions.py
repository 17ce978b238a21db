"""
Custom exception classes for the application.

This module defines domain-specific exceptions that provide better error handling
and clearer error messages throughout the application.
"""


class ApplicationError(Exception):
    """Base exception for all application errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when there's a configuration issue"""

    def __init__(self, message: str, invalid_keys: list[str] | None = None):
        details = {"invalid_keys": invalid_keys} if invalid_keys else {}
        super().__init__(message, details)


class EntityNotFoundError(ApplicationError):
    """Raised when a lookup by identifier matches no entity"""

    def __init__(self, entity_id: int, message: str | None = None):
        self.entity_id = entity_id
        details = {"entity_id": entity_id}
        msg = message or f"Cannot find entity with id {entity_id}"
        super().__init__(msg, details)


class UnhandledStreamError(ApplicationError):
    """Raised when a stream error reaches a subscriber without an error handler"""

    def __init__(self, cause: BaseException):
        self.cause = cause
        details = {"cause_type": type(cause).__name__}
        super().__init__(f"Stream error not handled by subscriber: {cause}", details)
