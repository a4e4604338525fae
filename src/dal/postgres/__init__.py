"""PostgreSQL catalog access.

This package contains the PostgreSQL implementations of the query executor and
catalog reader interfaces.
"""

from .catalog_reader import PostgresCatalogReader
from .query_executor import PostgresQueryExecutor

__all__ = [
    "PostgresCatalogReader",
    "PostgresQueryExecutor",
]
