import logging
from typing import Optional

from common.errors import GraphSyncError
from dal.neo4j import Neo4jSchemaGraphStore
from dal.postgres import PostgresCatalogReader, PostgresQueryExecutor
from schema import SyncCycleResult
from sync_worker.config import SyncConfig
from sync_worker.coordinator import SchemaSyncCoordinator

logger = logging.getLogger(__name__)


class SyncService:
    """Wires catalog readers, the graph store and the coordinator from config."""

    def __init__(self, config: SyncConfig):
        """Initialize with the immutable runtime configuration."""
        self.config = config
        self.reader: Optional[PostgresCatalogReader] = None
        self.graph_store: Optional[Neo4jSchemaGraphStore] = None
        self.coordinator: Optional[SchemaSyncCoordinator] = None

    async def init(self):
        """Create connection pools, the graph driver and the coordinator."""
        executors = {}
        try:
            for source in self.config.sources:
                executors[source.name] = await PostgresQueryExecutor.create(
                    source.name,
                    source.dsn,
                    min_size=self.config.pool_min_size,
                    max_size=self.config.pool_max_size,
                    command_timeout=self.config.command_timeout_seconds,
                    trace_queries=self.config.trace_queries,
                )
        except Exception:
            for executor in executors.values():
                await executor.close()
            raise
        self.reader = PostgresCatalogReader(executors, schema=self.config.catalog_schema)

        graph = self.config.graph
        self.graph_store = Neo4jSchemaGraphStore(
            graph.uri, graph.user, graph.password, database=graph.database
        )
        if self.config.ensure_indexes:
            try:
                self.graph_store.ensure_indexes()
            except GraphSyncError as e:
                logger.warning(f"Could not ensure graph indexes: {e}")

        self.coordinator = SchemaSyncCoordinator(
            self.reader,
            self.graph_store,
            database_names=self.config.database_names,
            interval_seconds=self.config.interval_seconds,
            cycle_timeout_seconds=self.config.cycle_timeout_seconds,
        )
        logger.info(f"Schema sync service initialized for {', '.join(self.config.database_names)}")

    async def start(self):
        """Initialize if needed and start periodic sync."""
        if self.coordinator is None:
            await self.init()
        await self.coordinator.start()

    async def run_once(self) -> SyncCycleResult:
        """Initialize if needed and run a single sync cycle."""
        if self.coordinator is None:
            await self.init()
        return await self.coordinator.trigger_now()

    async def close(self):
        """Stop the coordinator and release every connection."""
        if self.coordinator is not None:
            await self.coordinator.stop()
            self.coordinator = None
        if self.reader is not None:
            await self.reader.close()
            self.reader = None
        if self.graph_store is not None:
            self.graph_store.close()
            self.graph_store = None
        logger.info("Schema sync service closed")
