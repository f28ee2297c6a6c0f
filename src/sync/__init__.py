"""
Sync layer: clientId 기준 템플릿 create-or-reconcile.
"""

from .synchronizer import (
    TemplateSynchronizer,
    format_record,
    list_all,
    synchronize,
    validate_client_id,
)

__all__ = [
    "TemplateSynchronizer",
    "format_record",
    "list_all",
    "synchronize",
    "validate_client_id",
]
