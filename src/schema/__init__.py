"""Canonical schema-sync models shared by the DAL and the sync worker."""

from schema.catalog import ForeignKeyInfo, TableInfo
from schema.sync import (
    CyclePhase,
    CycleStatus,
    DiscoveryCount,
    GraphSyncSummary,
    SyncCycleResult,
)

__all__ = [
    "CyclePhase",
    "CycleStatus",
    "DiscoveryCount",
    "ForeignKeyInfo",
    "GraphSyncSummary",
    "SyncCycleResult",
    "TableInfo",
]
