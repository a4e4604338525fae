import logging
from typing import List, Mapping, Tuple

from common.errors import UnknownDatabaseError
from common.interfaces import QueryExecutor
from schema import ForeignKeyInfo, TableInfo

logger = logging.getLogger(__name__)

TABLES_QUERY = """
    SELECT table_schema, table_name
    FROM information_schema.tables
    WHERE table_schema = $1
    AND table_type = 'BASE TABLE'
    ORDER BY table_name
"""

FOREIGN_KEYS_QUERY = """
    SELECT
        tc.constraint_name,
        tc.table_name AS source_table,
        kcu.column_name AS source_column,
        ccu.table_name AS target_table,
        ccu.column_name AS target_column
    FROM information_schema.table_constraints AS tc
    JOIN information_schema.key_column_usage AS kcu
        ON tc.constraint_name = kcu.constraint_name
        AND tc.table_schema = kcu.table_schema
    JOIN information_schema.constraint_column_usage AS ccu
        ON ccu.constraint_name = tc.constraint_name
        AND ccu.table_schema = tc.table_schema
    WHERE tc.constraint_type = 'FOREIGN KEY'
    AND tc.table_schema = $1
    ORDER BY tc.table_name, tc.constraint_name
"""


class PostgresCatalogReader:
    """Discovers base tables and foreign keys via information_schema.

    Each logical database identifier maps to its own ``QueryExecutor``. The
    mapping is fixed at construction and its order is the discovery order.
    """

    def __init__(self, executors: Mapping[str, QueryExecutor], schema: str = "public"):
        """Initialize with an identifier -> executor mapping."""
        self._executors = dict(executors)
        self.schema = schema

    @property
    def database_names(self) -> Tuple[str, ...]:
        """Configured logical database identifiers, in discovery order."""
        return tuple(self._executors)

    def _executor_for(self, database_name: str) -> QueryExecutor:
        try:
            return self._executors[database_name]
        except KeyError:
            raise UnknownDatabaseError(database_name, self.database_names) from None

    async def discover_tables(self, database_name: str) -> List[TableInfo]:
        """List base tables in the configured schema, ordered by name."""
        executor = self._executor_for(database_name)
        rows = await executor.fetch(TABLES_QUERY, self.schema)

        tables = [
            TableInfo(
                database_name=database_name,
                schema_name=row["table_schema"],
                table_name=row["table_name"],
            )
            for row in rows
        ]
        logger.debug(f"Discovered {len(tables)} tables in {database_name}.{self.schema}")
        return tables

    async def discover_foreign_keys(self, database_name: str) -> List[ForeignKeyInfo]:
        """List foreign keys in the configured schema, ordered by table then constraint."""
        executor = self._executor_for(database_name)
        rows = await executor.fetch(FOREIGN_KEYS_QUERY, self.schema)

        foreign_keys = [
            ForeignKeyInfo(
                database_name=database_name,
                constraint_name=row["constraint_name"],
                source_table=row["source_table"],
                source_column=row["source_column"],
                target_table=row["target_table"],
                target_column=row["target_column"],
            )
            for row in rows
        ]
        logger.debug(
            f"Discovered {len(foreign_keys)} foreign keys in {database_name}.{self.schema}"
        )
        return foreign_keys

    async def close(self) -> None:
        """Close every bound executor."""
        for executor in self._executors.values():
            await executor.close()
