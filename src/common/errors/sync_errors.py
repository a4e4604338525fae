"""Error taxonomy for schema discovery and graph sync."""

from typing import Optional, Sequence


class SchemaSyncError(RuntimeError):
    """Base class for schema sync failures."""


class UnknownDatabaseError(SchemaSyncError):
    """Raised when discovery is requested for an unconfigured logical database."""

    def __init__(self, database_name: str, known: Sequence[str] = ()) -> None:
        """Record the rejected identifier and the configured ones."""
        known_list = ", ".join(known) if known else "<none>"
        super().__init__(f"Unknown database: {database_name!r}. Configured: {known_list}")
        self.database_name = database_name
        self.known = tuple(known)


class QueryExecutionError(SchemaSyncError):
    """Raised when a catalog query fails (connectivity, SQL, permission)."""

    def __init__(
        self, message: str, *, database_name: Optional[str] = None, category: str = "unknown"
    ) -> None:
        """Initialize with the failing database and a classified category."""
        super().__init__(message)
        self.database_name = database_name
        self.category = category


class GraphSyncError(SchemaSyncError):
    """Raised when writing the schema graph fails.

    The original driver exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, phase: Optional[str] = None) -> None:
        """Initialize with the write pass that failed."""
        super().__init__(message)
        self.phase = phase
