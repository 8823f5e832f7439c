"""
Graph backend health check tests.

Acceptance: the health check returns True when the backend answers,
False otherwise; the detailed check reports status, mode, url and latency.
"""

import pytest

from src.dbdriver.executor import TransactionExecutor
from src.dbdriver.health import (
    HEALTH_QUERY,
    check_graph_health,
    check_graph_health_detailed,
)
from tests.fakes import FakeBackendDriver, FakeSummary, FakeTransientError


class TestGraphHealthCheck:
    """Tests for connectivity and health verification."""

    @pytest.mark.asyncio
    async def test_returns_true_when_connected(
        self, executor: TransactionExecutor, backend: FakeBackendDriver
    ):
        """
        GIVEN a reachable backend
        WHEN check_graph_health is called
        THEN it returns True
        """
        assert await check_graph_health(executor) is True
        assert backend.verify_calls == 1

    @pytest.mark.asyncio
    async def test_returns_false_when_disconnected(
        self, executor: TransactionExecutor, backend: FakeBackendDriver
    ):
        backend.connectivity_error = OSError("Connection refused")

        assert await check_graph_health(executor) is False

    @pytest.mark.asyncio
    async def test_returns_false_after_close(self, executor: TransactionExecutor):
        await executor.close()

        assert await check_graph_health(executor) is False


class TestGraphHealthCheckDetailed:
    """Tests for the detailed health report."""

    @pytest.mark.asyncio
    async def test_healthy_report_uses_read_latency(
        self, executor: TransactionExecutor, backend: FakeBackendDriver
    ):
        backend.summary = FakeSummary(result_available_after=12)

        result = await check_graph_health_detailed(executor)

        assert result == {
            "mode": "neo4j",
            "url": "bolt://localhost:7687",
            "status": "healthy",
            "latency_ms": 12.0,
        }
        assert backend.runs[0][0] == HEALTH_QUERY
        assert backend.tx_timeouts == [5]

    @pytest.mark.asyncio
    async def test_unreachable_backend(
        self, executor: TransactionExecutor, backend: FakeBackendDriver
    ):
        backend.connectivity_error = OSError("Connection refused")

        result = await check_graph_health_detailed(executor)

        assert result["status"] == "unhealthy"
        assert "Connection refused" in result["error"]

    @pytest.mark.asyncio
    async def test_failed_probe_reports_retry_flag(
        self, executor: TransactionExecutor, backend: FakeBackendDriver
    ):
        backend.fail_at("run", FakeTransientError("leader switch"))

        result = await check_graph_health_detailed(executor)

        assert result["status"] == "unhealthy"
        assert result["retryable"] is True
        assert backend.open_sessions == 0
