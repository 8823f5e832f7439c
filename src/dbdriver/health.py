"""
Graph backend health checks.

Provides connectivity verification through an existing executor; no new
driver is created for a probe.
"""

from typing import Any

from src.dbdriver.exceptions import (
    DriverConnectionError,
    GraphDriverError,
    TransactionError,
)
from src.dbdriver.executor import TransactionExecutor
from src.dbdriver.models import QueryRequest

HEALTH_QUERY = "RETURN 1 AS ok"
HEALTH_TIMEOUT_SECONDS = 5


async def check_graph_health(executor: TransactionExecutor) -> bool:
    """
    Check if the graph backend is healthy and reachable.

    Args:
        executor: Executor wrapping the driver handle to probe

    Returns:
        True if the backend answers a connectivity check, False otherwise
    """
    try:
        await executor.verify_connectivity()
        return True
    except GraphDriverError:
        return False


async def check_graph_health_detailed(executor: TransactionExecutor) -> dict[str, Any]:
    """
    Check backend health with latency taken from the read statistics.

    Args:
        executor: Executor wrapping the driver handle to probe

    Returns:
        Dictionary with status, mode, url and latency_ms or error
    """
    details: dict[str, Any] = {
        "mode": executor.get_mode(),
        "url": executor.handle.url,
    }
    try:
        await executor.verify_connectivity()
        result = await executor.read_tx(
            QueryRequest(HEALTH_QUERY, timeout_seconds=HEALTH_TIMEOUT_SECONDS)
        )
    except DriverConnectionError as e:
        return {**details, "status": "unhealthy", "error": f"Service unavailable: {e.cause}"}
    except TransactionError as e:
        return {
            **details,
            "status": "unhealthy",
            "error": str(e),
            "retryable": e.retryable,
        }
    except GraphDriverError as e:
        return {**details, "status": "unhealthy", "error": str(e)}

    latency_ms = result.stats.response_time_seconds * 1000 if result.stats else 0.0
    return {**details, "status": "healthy", "latency_ms": round(latency_ms, 2)}
