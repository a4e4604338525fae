from typing import Any, List, Mapping, Protocol, runtime_checkable


@runtime_checkable
class QueryExecutor(Protocol):
    """Protocol for running read-only SQL against one logical database.

    Each executor is bound to exactly one physical connection target, so rows
    never need to carry the logical database identifier themselves.
    """

    database_name: str

    async def fetch(self, sql: str, *params: Any) -> List[Mapping[str, Any]]:
        """Execute a query and return rows as mappings.

        Args:
            sql: Query text with positional placeholders.
            *params: Values bound to the placeholders.

        Returns:
            One mapping per result row, keyed by column name.

        Raises:
            QueryExecutionError: On connectivity, SQL or permission failures.
        """
        ...

    async def close(self) -> None:
        """Release the underlying connections."""
        ...
