"""Common error taxonomy."""

from common.errors.sync_errors import (
    GraphSyncError,
    QueryExecutionError,
    SchemaSyncError,
    UnknownDatabaseError,
)

__all__ = [
    "GraphSyncError",
    "QueryExecutionError",
    "SchemaSyncError",
    "UnknownDatabaseError",
]
