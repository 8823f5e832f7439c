"""
Value objects shared by the driver handle and the transaction executor.

All types here are transient: they are created per call, never mutated,
and hold no backend resources.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from src.core.config import Settings

# Default bound for managed and single-statement reads/writes
READ_TX_TIMEOUT_SECONDS = 30
SINGLE_TX_TIMEOUT_SECONDS = 30


# =============================================================================
# Construction
# =============================================================================


class DriverMode(str, Enum):
    """Backend dialects that share the Bolt protocol.

    - NEO4J: Neo4j server, sessions are bound to a named database
    - MEMGRAPH: Memgraph server, single database per instance
    """

    NEO4J = "neo4j"
    MEMGRAPH = "memgraph"


@dataclass(frozen=True)
class DriverParams:
    """Connection parameters used once at handle construction."""

    host: str
    user: str
    password: str
    port: int | str = 7687

    @property
    def url(self) -> str:
        """Bolt URL for the backend."""
        return f"bolt://{self.host}:{self.port}"

    @classmethod
    def from_settings(cls, settings: Settings) -> DriverParams:
        return cls(
            host=settings.graph_host,
            user=settings.graph_user,
            password=settings.graph_password,
            port=settings.graph_port,
        )


# =============================================================================
# Requests
# =============================================================================


@dataclass(frozen=True)
class QueryRequest:
    """One transaction's query text, parameters and optional timeout.

    Attributes:
        cypher: Query text; must be non-blank when executed
        params: Named query parameters
        timeout_seconds: Override for the managed read timeout
    """

    cypher: str
    params: dict[str, Any] = field(default_factory=dict)
    timeout_seconds: int | None = None


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class DriverStats:
    """Timing statistics for a managed read.

    Attributes:
        response_time: available_time when the backend reported it, else measured_time
        measured_time: Wall clock around the query body
        available_time: Backend "result available after" metric
        consumed_time: Backend "result consumed after" metric
        response_time_seconds: response_time as float seconds
    """

    response_time: timedelta = timedelta(0)
    measured_time: timedelta = timedelta(0)
    available_time: timedelta = timedelta(0)
    consumed_time: timedelta = timedelta(0)
    response_time_seconds: float = 0.0

    @classmethod
    def from_timings(
        cls,
        measured: timedelta,
        available_after_ms: int | None,
        consumed_after_ms: int | None,
    ) -> DriverStats:
        """Build stats, preferring the backend's availability metric."""
        available = timedelta(milliseconds=available_after_ms or 0)
        consumed = timedelta(milliseconds=consumed_after_ms or 0)
        response = available if available > timedelta(0) else measured
        return cls(
            response_time=response,
            measured_time=measured,
            available_time=available,
            consumed_time=consumed,
            response_time_seconds=response.total_seconds(),
        )


@dataclass(frozen=True)
class WriteSummary:
    """Mutation counters reported by the backend for one write."""

    nodes_created: int = 0
    nodes_deleted: int = 0
    relationships_created: int = 0
    relationships_deleted: int = 0

    @classmethod
    def from_counters(cls, counters: Any) -> WriteSummary:
        return cls(
            nodes_created=counters.nodes_created,
            nodes_deleted=counters.nodes_deleted,
            relationships_created=counters.relationships_created,
            relationships_deleted=counters.relationships_deleted,
        )


@dataclass(frozen=True)
class TxResult:
    """Normalized outcome of every execution mode.

    Successful calls return it directly; failed calls attach it to the
    raised TransactionError so the retry flag and any partial summary
    are read the same way on both paths.

    Attributes:
        records: Materialized result rows (empty for write modes)
        stats: Timing statistics (managed read only)
        summary: Mutation counters (managed write only)
        retryable: Retry classification of the failure, False on success
    """

    records: list[Any] = field(default_factory=list)
    stats: DriverStats | None = None
    summary: WriteSummary | None = None
    retryable: bool = False
