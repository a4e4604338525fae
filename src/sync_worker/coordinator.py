"""Scheduled schema discovery and graph sync.

One cycle discovers every configured database in order, then writes the
combined result to the graph once. Failures are contained at the cycle
boundary so the next scheduled cycle always runs.

Overlapping ticks are serialized: a single loop drives cycles, so a cycle
that overruns the interval delays the next one, which then starts
immediately. Missed ticks are coalesced into that one cycle.

A cycle timeout cancels discovery at once, but a graph write already handed
to a worker thread runs to completion before the cycle releases its lock.
Such a cycle is still reported as timed out.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from common.interfaces import CatalogReader, SchemaGraphWriter
from schema import (
    CyclePhase,
    CycleStatus,
    DiscoveryCount,
    ForeignKeyInfo,
    SyncCycleResult,
    TableInfo,
)

logger = logging.getLogger(__name__)


class CoordinatorState(str, Enum):
    """Lifecycle state of the coordinator."""

    IDLE = "idle"
    RUNNING = "running"


async def run_sync_cycle(
    reader: CatalogReader,
    writer: SchemaGraphWriter,
    database_names: Sequence[str],
    clock: Callable[[], float] = time.monotonic,
) -> SyncCycleResult:
    """Run one discovery-then-write cycle and never raise.

    A discovery failure for any database skips the graph write for the whole
    cycle, including data already gathered from other databases.
    """
    started = clock()
    logger.info(
        "Starting scheduled schema sync for all databases...",
        extra={"event": "sync_cycle_started", "databases": list(database_names)},
    )

    all_tables: List[TableInfo] = []
    all_foreign_keys: List[ForeignKeyInfo] = []
    counts: Dict[str, DiscoveryCount] = {}

    current: Optional[str] = None
    try:
        for name in database_names:
            current = name
            logger.info(f"Syncing {name}...")
            tables = await reader.discover_tables(name)
            foreign_keys = await reader.discover_foreign_keys(name)
            logger.info(
                f"Discovered {len(tables)} tables and {len(foreign_keys)} foreign keys from {name}",
                extra={
                    "event": "sync_database_discovered",
                    "database": name,
                    "tables": len(tables),
                    "foreign_keys": len(foreign_keys),
                },
            )
            counts[name] = DiscoveryCount(tables=len(tables), foreign_keys=len(foreign_keys))
            all_tables.extend(tables)
            all_foreign_keys.extend(foreign_keys)
    except Exception as e:
        logger.error(
            f"Error during schema discovery for {current}; skipping graph write: {e}",
            exc_info=True,
            extra={
                "event": "sync_cycle_failed",
                "phase": CyclePhase.DISCOVERY.value,
                "database": current,
                "error_type": e.__class__.__name__,
            },
        )
        return SyncCycleResult(
            status=CycleStatus.FAILED,
            failed_phase=CyclePhase.DISCOVERY,
            failed_database=current,
            error=str(e),
            database_counts=counts,
            total_tables=len(all_tables),
            total_foreign_keys=len(all_foreign_keys),
            duration_seconds=clock() - started,
        )

    # The graph driver is blocking; keep the event loop free.
    write = asyncio.ensure_future(
        asyncio.to_thread(writer.sync_schema, all_tables, all_foreign_keys)
    )
    try:
        summary = await asyncio.shield(write)
    except asyncio.CancelledError:
        # A worker thread cannot be interrupted. Hold the caller, and with it the
        # cycle lock, until the in-flight write has finished.
        logger.warning("Schema sync cycle cancelled; waiting for in-flight graph write")
        await asyncio.wait({write})
        if write.exception() is not None:
            logger.error(f"In-flight graph write failed after cancellation: {write.exception()}")
        raise
    except Exception as e:
        logger.error(
            f"Error during schema graph write: {e}",
            exc_info=True,
            extra={
                "event": "sync_cycle_failed",
                "phase": CyclePhase.WRITE.value,
                "error_type": e.__class__.__name__,
            },
        )
        return SyncCycleResult(
            status=CycleStatus.FAILED,
            failed_phase=CyclePhase.WRITE,
            error=str(e),
            database_counts=counts,
            total_tables=len(all_tables),
            total_foreign_keys=len(all_foreign_keys),
            duration_seconds=clock() - started,
        )

    duration = clock() - started
    logger.info(
        f"Schema sync completed successfully. Total: {len(all_tables)} tables, "
        f"{len(all_foreign_keys)} foreign keys",
        extra={
            "event": "sync_cycle_completed",
            "tables": len(all_tables),
            "foreign_keys": len(all_foreign_keys),
            "relationships_written": summary.relationships_written,
            "duration_seconds": round(duration, 3),
        },
    )
    return SyncCycleResult(
        status=CycleStatus.SUCCEEDED,
        database_counts=counts,
        total_tables=len(all_tables),
        total_foreign_keys=len(all_foreign_keys),
        graph_summary=summary,
        duration_seconds=duration,
    )


def next_delay(interval_seconds: float, elapsed_seconds: float) -> float:
    """Seconds to wait so ticks stay ``interval_seconds`` apart, start to start."""
    return max(0.0, interval_seconds - elapsed_seconds)


class SchemaSyncCoordinator:
    """Background task for periodic schema sync."""

    def __init__(
        self,
        reader: CatalogReader,
        writer: SchemaGraphWriter,
        database_names: Optional[Sequence[str]] = None,
        interval_seconds: float = 300.0,
        cycle_timeout_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize with collaborators and cadence."""
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.reader = reader
        self.writer = writer
        self.database_names = tuple(database_names or reader.database_names)
        self.interval_seconds = interval_seconds
        self.cycle_timeout_seconds = cycle_timeout_seconds
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._stopping = False
        self._cycle_lock = asyncio.Lock()
        self.state = CoordinatorState.IDLE
        self.last_result: Optional[SyncCycleResult] = None
        self.stats = {"cycles_started": 0, "cycles_succeeded": 0, "cycles_failed": 0}

    @property
    def is_running(self) -> bool:
        """Return True while the background loop is active."""
        return self._task is not None and not self._task.done()

    async def start(self):
        """Start the background task."""
        if self.is_running:
            logger.debug("Schema sync coordinator already running")
            return
        self._stopping = False
        self._task = asyncio.create_task(self._run())
        logger.info(f"Schema sync coordinator started (Interval: {self.interval_seconds}s)")

    async def stop(self):
        """Stop the background task."""
        self._stopping = True
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            finally:
                self._task = None
        logger.info("Schema sync coordinator stopped")

    async def trigger_now(self) -> SyncCycleResult:
        """Run one cycle immediately, serialized with scheduled cycles."""
        return await self._run_cycle()

    async def _run_cycle(self) -> SyncCycleResult:
        async with self._cycle_lock:
            self.state = CoordinatorState.RUNNING
            self.stats["cycles_started"] += 1
            started = self._clock()
            try:
                cycle = run_sync_cycle(self.reader, self.writer, self.database_names, self._clock)
                if self.cycle_timeout_seconds:
                    result = await asyncio.wait_for(cycle, timeout=self.cycle_timeout_seconds)
                else:
                    result = await cycle
            except asyncio.TimeoutError:
                logger.error(
                    f"Schema sync cycle exceeded {self.cycle_timeout_seconds}s timeout",
                    extra={"event": "sync_cycle_failed", "phase": CyclePhase.TIMEOUT.value},
                )
                result = SyncCycleResult(
                    status=CycleStatus.FAILED,
                    failed_phase=CyclePhase.TIMEOUT,
                    error=f"cycle timed out after {self.cycle_timeout_seconds}s",
                    duration_seconds=self._clock() - started,
                )
            finally:
                self.state = CoordinatorState.IDLE

            if result.succeeded:
                self.stats["cycles_succeeded"] += 1
            else:
                self.stats["cycles_failed"] += 1
            self.last_result = result
            return result

    async def _run(self):
        """Loop that runs sync cycles at a fixed rate."""
        while not self._stopping:
            tick_started = self._clock()
            await self._run_cycle()

            delay = next_delay(self.interval_seconds, self._clock() - tick_started)
            if delay == 0.0:
                logger.warning(
                    f"Schema sync cycle overran the {self.interval_seconds}s interval; "
                    "starting next cycle immediately"
                )
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                break
