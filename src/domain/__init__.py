"""Domain layer: errors, schemas, constants."""

from .errors import (
    ErrorCodes,
    MailTemplateError,
    PersistenceError,
    StoreConnectionError,
    ValidationError,
)
from .schemas import (
    Severity,
    SyncOutcome,
    SyncResult,
    TemplateRecord,
)

__all__ = [
    "ErrorCodes",
    "MailTemplateError",
    "ValidationError",
    "PersistenceError",
    "StoreConnectionError",
    "Severity",
    "SyncOutcome",
    "SyncResult",
    "TemplateRecord",
]
