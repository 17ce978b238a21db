"""
Service layer.
"""

from .crud_service import CrudService
from .interfaces import IEntityRepository
from .result_stream import Notification, ResultStream, StreamEmitter, Subscription

__all__ = [
    "CrudService",
    "IEntityRepository",
    "Notification",
    "ResultStream",
    "StreamEmitter",
    "Subscription",
]
