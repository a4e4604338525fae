import asyncio
import logging
from typing import Any, List, Mapping, Optional

import asyncpg

from common.errors import QueryExecutionError
from dal.error_classification import classify_error
from dal.tracing import trace_catalog_query

logger = logging.getLogger(__name__)

QUERY_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


class PostgresQueryExecutor:
    """Read-only query executor bound to one logical PostgreSQL database."""

    provider = "postgres"

    def __init__(self, database_name: str, pool: Any, trace_queries: bool = False):
        """Wrap an existing pool (or any object with an ``acquire()`` context)."""
        self.database_name = database_name
        self._pool = pool
        self._trace_queries = trace_queries

    @classmethod
    async def create(
        cls,
        database_name: str,
        dsn: str,
        *,
        min_size: int = 0,
        max_size: int = 2,
        command_timeout: Optional[float] = 30.0,
        trace_queries: bool = False,
    ) -> "PostgresQueryExecutor":
        """Create a pool for ``dsn`` and bind it to ``database_name``.

        With ``min_size=0`` no connection is opened until the first query, so an
        unavailable database surfaces as a query failure rather than a startup
        failure.
        """
        pool = await asyncpg.create_pool(
            dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
            server_settings={"application_name": "schema_graph_sync"},
        )
        logger.info(f"Connection pool created for {database_name}")
        return cls(database_name, pool, trace_queries=trace_queries)

    async def fetch(self, sql: str, *params: Any) -> List[Mapping[str, Any]]:
        """Run ``sql`` inside a read-only transaction and return rows as dicts."""
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction(readonly=True):
                    rows = await trace_catalog_query(
                        "dal.catalog_query",
                        self.provider,
                        self.database_name,
                        sql,
                        conn.fetch(sql, *params),
                        enabled=self._trace_queries,
                    )
        except QUERY_ERRORS as e:
            category = classify_error(self.provider, e)
            raise QueryExecutionError(
                f"Catalog query failed for {self.database_name} ({category}): {e}",
                database_name=self.database_name,
                category=category,
            ) from e

        return [dict(row) for row in rows]

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            logger.info(f"Connection pool closed for {self.database_name}")
            self._pool = None
