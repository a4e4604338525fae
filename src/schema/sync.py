from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class CyclePhase(str, Enum):
    """Phase of a sync cycle that failed."""

    DISCOVERY = "discovery"
    WRITE = "write"
    TIMEOUT = "timeout"


class CycleStatus(str, Enum):
    """Outcome of a sync cycle."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


class DiscoveryCount(BaseModel):
    """Number of entities discovered for one logical database."""

    tables: int = 0
    foreign_keys: int = 0

    model_config = {"frozen": True}


class GraphSyncSummary(BaseModel):
    """What a single graph write wrote.

    ``relationships_written`` can be lower than the number of foreign keys
    submitted when an endpoint table node does not exist.
    """

    tables_written: int = 0
    relationships_written: int = 0

    model_config = {"frozen": True}


class SyncCycleResult(BaseModel):
    """Summary of one discovery-then-write cycle."""

    status: CycleStatus
    failed_phase: Optional[CyclePhase] = None
    failed_database: Optional[str] = None
    error: Optional[str] = None
    database_counts: Dict[str, DiscoveryCount] = Field(default_factory=dict)
    total_tables: int = 0
    total_foreign_keys: int = 0
    graph_summary: Optional[GraphSyncSummary] = None
    duration_seconds: float = 0.0

    model_config = {"frozen": True}

    @property
    def succeeded(self) -> bool:
        """Return True when the cycle completed its graph write."""
        return self.status == CycleStatus.SUCCEEDED
