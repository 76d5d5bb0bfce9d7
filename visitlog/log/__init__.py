"""
Visit logs stored in the document store, linked to relational visits by id.
"""

# Package initialization for visit log module
from .records import VisitLog, VisitLogDocument
from .repository import IVisitLogStore, MongoVisitLogStore, InMemoryVisitLogStore
from .service import VisitLogService, build_visit_log_service
from .errors import (
    VisitLogError,
    VisitLogNotFoundError,
    MissingParentError,
    DataCorruptionError,
    StoreUnavailableError,
    OperationCancelledError
)

__all__ = [
    'VisitLog',
    'VisitLogDocument',
    'IVisitLogStore',
    'MongoVisitLogStore',
    'InMemoryVisitLogStore',
    'VisitLogService',
    'build_visit_log_service',
    'VisitLogError',
    'VisitLogNotFoundError',
    'MissingParentError',
    'DataCorruptionError',
    'StoreUnavailableError',
    'OperationCancelledError'
]
