"""Interfaces shared by the DAL and the sync worker."""

from .catalog_reader import CatalogReader
from .query_executor import QueryExecutor
from .schema_graph_writer import SchemaGraphWriter

__all__ = [
    "CatalogReader",
    "QueryExecutor",
    "SchemaGraphWriter",
]
