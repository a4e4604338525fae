import logging
from typing import Any, Optional, Sequence

from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from common.errors import GraphSyncError
from schema import ForeignKeyInfo, GraphSyncSummary, TableInfo

logger = logging.getLogger(__name__)

GRAPH_ERRORS = (Neo4jError, DriverError, OSError)

TABLE_LABEL = "Table"
FOREIGN_KEY_TYPE = "HAS_FOREIGN_KEY"

UPSERT_TABLE_QUERY = f"""
MERGE (t:{TABLE_LABEL} {{name: $table_name, database: $database_name}})
SET t.schema = $schema_name,
    t.updatedAt = datetime()
"""

# Both endpoints are matched inside the same database; a missing endpoint
# yields zero rows and therefore no relationship.
UPSERT_FOREIGN_KEY_QUERY = f"""
MATCH (source:{TABLE_LABEL} {{name: $source_table, database: $database_name}})
MATCH (target:{TABLE_LABEL} {{name: $target_table, database: $database_name}})
MERGE (source)-[r:{FOREIGN_KEY_TYPE} {{
    constraintName: $constraint_name,
    sourceColumn: $source_column,
    targetColumn: $target_column,
    database: $database_name
}}]->(target)
SET r.updatedAt = datetime()
RETURN count(r) AS written
"""

TABLE_INDEX_QUERY = f"""
CREATE INDEX table_identity IF NOT EXISTS
FOR (t:{TABLE_LABEL}) ON (t.name, t.database)
"""


class Neo4jSchemaGraphStore:
    """Projects discovered schema into Neo4j.

    Uses the Neo4j Python driver over Bolt. Nodes and relationships are
    matched on explicit properties so repeated syncs only refresh timestamps.
    """

    def __init__(
        self,
        uri: str,
        user: str,
        password: str,
        database: Optional[str] = None,
        driver: Any = None,
    ):
        """Initialize the Neo4j driver."""
        self.driver = driver or GraphDatabase.driver(uri, auth=(user, password))
        self.database = database

    def close(self):
        """Close driver connection."""
        self.driver.close()

    def _session(self):
        if self.database:
            return self.driver.session(database=self.database)
        return self.driver.session()

    def sync_schema(
        self,
        tables: Sequence[TableInfo],
        foreign_keys: Sequence[ForeignKeyInfo],
    ) -> GraphSyncSummary:
        """Upsert all table nodes, then all foreign-key relationships.

        Runs in a single session that is released on every exit path. Any
        driver failure is re-raised as GraphSyncError.
        """
        phase = "session"
        try:
            with self._session() as session:
                phase = "tables"
                tables_written = self._upsert_table_nodes(session, tables)
                phase = "foreign_keys"
                relationships_written = self._upsert_foreign_keys(session, foreign_keys)
        except GRAPH_ERRORS as e:
            logger.error(f"Error syncing schema to Neo4j during {phase}: {e}")
            raise GraphSyncError(
                f"Failed to sync schema to Neo4j ({phase}): {e}", phase=phase
            ) from e

        skipped = len(foreign_keys) - relationships_written
        if skipped:
            logger.info(f"Skipped {skipped} foreign keys with missing endpoint tables")
        logger.info(
            f"Successfully synced {tables_written} tables and "
            f"{relationships_written} foreign keys to Neo4j"
        )
        return GraphSyncSummary(
            tables_written=tables_written,
            relationships_written=relationships_written,
        )

    def _upsert_table_nodes(self, session, tables: Sequence[TableInfo]) -> int:
        for table in tables:
            session.run(
                UPSERT_TABLE_QUERY,
                table_name=table.table_name,
                database_name=table.database_name,
                schema_name=table.schema_name,
            ).consume()
            logger.debug(f"Created/updated table node: {table.database_name}.{table.table_name}")
        return len(tables)

    def _upsert_foreign_keys(self, session, foreign_keys: Sequence[ForeignKeyInfo]) -> int:
        written = 0
        for fk in foreign_keys:
            record = session.run(
                UPSERT_FOREIGN_KEY_QUERY,
                source_table=fk.source_table,
                target_table=fk.target_table,
                database_name=fk.database_name,
                constraint_name=fk.constraint_name,
                source_column=fk.source_column,
                target_column=fk.target_column,
            ).single()
            count = record["written"] if record else 0
            written += count
            if count:
                logger.debug(
                    f"Created/updated foreign key {fk.constraint_name}: "
                    f"{fk.database_name}.{fk.source_table} -> "
                    f"{fk.database_name}.{fk.target_table}"
                )
            else:
                logger.debug(
                    f"No endpoint nodes for foreign key {fk.constraint_name} in "
                    f"{fk.database_name}; relationship not created"
                )
        return written

    def ensure_indexes(self) -> None:
        """Create the composite (name, database) index on Table nodes."""
        try:
            with self._session() as session:
                session.run(TABLE_INDEX_QUERY).consume()
        except GRAPH_ERRORS as e:
            raise GraphSyncError(f"Failed to create graph indexes: {e}", phase="indexes") from e
        logger.info("Ensured Table(name, database) index")
