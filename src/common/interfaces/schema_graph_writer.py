from typing import Protocol, Sequence, runtime_checkable

from schema import ForeignKeyInfo, GraphSyncSummary, TableInfo


@runtime_checkable
class SchemaGraphWriter(Protocol):
    """Protocol for projecting discovered schema into a graph store.

    Implementations upsert by explicit property equality, never by internal
    graph identity, and never delete anything.
    """

    def sync_schema(
        self,
        tables: Sequence[TableInfo],
        foreign_keys: Sequence[ForeignKeyInfo],
    ) -> GraphSyncSummary:
        """Upsert table nodes, then foreign-key relationships.

        Args:
            tables: Tables to upsert, keyed by (database, name).
            foreign_keys: Constraints to upsert between existing table nodes
                of the same database.

        Returns:
            Counts of what was written.

        Raises:
            GraphSyncError: If either upsert pass fails.
        """
        ...

    def ensure_indexes(self) -> None:
        """Create lookup indexes used by the upserts, if missing."""
        ...

    def close(self) -> None:
        """Close the underlying driver."""
        ...
