from typing import List, Protocol, Tuple, runtime_checkable

from schema import ForeignKeyInfo, TableInfo


@runtime_checkable
class CatalogReader(Protocol):
    """Protocol for discovering tables and foreign keys from relational catalogs."""

    @property
    def database_names(self) -> Tuple[str, ...]:
        """Configured logical database identifiers, in discovery order."""
        ...

    async def discover_tables(self, database_name: str) -> List[TableInfo]:
        """List base tables of the given logical database.

        Raises:
            UnknownDatabaseError: If ``database_name`` is not configured.
            QueryExecutionError: If the catalog query fails.
        """
        ...

    async def discover_foreign_keys(self, database_name: str) -> List[ForeignKeyInfo]:
        """List column-level foreign keys of the given logical database.

        Raises:
            UnknownDatabaseError: If ``database_name`` is not configured.
            QueryExecutionError: If the catalog query fails.
        """
        ...
