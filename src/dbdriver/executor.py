"""
Transaction executor over a DriverHandle.

Four execution modes share one result shape (TxResult) and one failure
shape (TransactionError carrying a TxResult):

- read_tx: managed read, bounded by the request timeout, returns DriverStats
- write_commit_tx: managed write, returns WriteSummary
- write_single_tx: auto-commit statement, fixed timeout, no summary
- read_single_tx: auto-commit read, fixed timeout, no stats

Every call acquires a fresh session in an ``async with`` block, so the
session is released exactly once on success, failure, timeout and
cancellation. No retry loop runs here beyond the backend's own managed
transaction retries; callers re-run the request when ``retryable`` is set.

Usage:
    executor = await TransactionExecutor.connect(get_settings())
    result = await executor.read_tx(QueryRequest("MATCH (n) RETURN n LIMIT 5"))
    print(result.stats.response_time_seconds)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from neo4j import Query, unit_of_work

from src.dbdriver.events import DriverEventLogger
from src.dbdriver.exceptions import (
    DriverConnectionError,
    GraphDriverError,
    InvalidQueryError,
    TransactionError,
    TransactionTimeoutError,
)
from src.dbdriver.handle import DriverHandle
from src.dbdriver.models import (
    READ_TX_TIMEOUT_SECONDS,
    SINGLE_TX_TIMEOUT_SECONDS,
    DriverParams,
    DriverStats,
    QueryRequest,
    TxResult,
    WriteSummary,
)
from src.dbdriver.retry import RetryClassifier, is_retryable

if TYPE_CHECKING:
    from src.core.config import Settings

T = TypeVar("T")


@runtime_checkable
class GraphDriverProtocol(Protocol):
    """Interface every caller of the driver layer depends on."""

    async def read_tx(self, request: QueryRequest) -> TxResult:
        """Managed read with timing statistics."""
        ...

    async def write_tx(self, request: QueryRequest) -> TxResult:
        """Managed write without summary."""
        ...

    async def write_commit_tx(self, request: QueryRequest) -> TxResult:
        """Managed write with mutation summary."""
        ...

    async def write_single_tx(self, request: QueryRequest) -> TxResult:
        """Auto-commit write."""
        ...

    async def read_single_tx(self, request: QueryRequest) -> TxResult:
        """Auto-commit read."""
        ...

    async def verify_connectivity(self) -> None:
        """Ping the backend."""
        ...

    def get_mode(self) -> str:
        """Backend dialect tag."""
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...


class TransactionExecutor:
    """Runs transactions against a DriverHandle.

    Holds no per-call state, so one executor is shared by any number of
    concurrent tasks. Only the handle's connection pool is shared.
    """

    def __init__(
        self,
        handle: DriverHandle,
        *,
        logger: logging.Logger | None = None,
        retry_classifier: RetryClassifier = is_retryable,
        read_timeout_seconds: int = READ_TX_TIMEOUT_SECONDS,
        single_tx_timeout_seconds: int = SINGLE_TX_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the executor.

        Args:
            handle: Owner of the backend driver
            logger: Logger receiving structured events (injectable for tests)
            retry_classifier: Predicate deciding whether a failure is retryable
            read_timeout_seconds: Default timeout for read_tx
            single_tx_timeout_seconds: Fixed timeout for the single-statement modes
        """
        self._handle = handle
        self._events = DriverEventLogger(logger)
        self._is_retryable = retry_classifier
        self._read_timeout_seconds = read_timeout_seconds
        self._single_tx_timeout_seconds = single_tx_timeout_seconds

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        logger: logging.Logger | None = None,
        retry_classifier: RetryClassifier = is_retryable,
    ) -> TransactionExecutor:
        """Build the handle and executor from application settings.

        Raises:
            DriverConfigurationError: If the handle cannot be constructed.
        """
        handle = DriverHandle(
            settings.graph_mode,
            DriverParams.from_settings(settings),
            database=settings.graph_database,
            logger=logger,
        )
        return cls(
            handle,
            logger=logger,
            retry_classifier=retry_classifier,
            read_timeout_seconds=settings.read_tx_timeout_seconds,
            single_tx_timeout_seconds=settings.single_tx_timeout_seconds,
        )

    @classmethod
    async def connect(
        cls,
        settings: Settings,
        *,
        logger: logging.Logger | None = None,
        retry_classifier: RetryClassifier = is_retryable,
    ) -> TransactionExecutor:
        """Build from settings and verify connectivity before returning.

        Raises:
            DriverConfigurationError: If the handle cannot be constructed.
            DriverConnectionError: If the backend is unreachable.
        """
        executor = cls.from_settings(
            settings, logger=logger, retry_classifier=retry_classifier
        )
        try:
            await executor.verify_connectivity()
        except DriverConnectionError:
            await executor.close()
            raise
        return executor

    @property
    def handle(self) -> DriverHandle:
        return self._handle

    # -------------------------------------------------------------------------
    # Connectivity & lifecycle
    # -------------------------------------------------------------------------

    async def verify_connectivity(self) -> None:
        await self._handle.verify_connectivity()

    def get_mode(self) -> str:
        return self._handle.get_mode()

    async def close(self) -> None:
        await self._handle.close()

    async def __aenter__(self) -> TransactionExecutor:
        """Async context manager entry - verify connectivity."""
        await self.verify_connectivity()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit - close the handle."""
        await self.close()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate(action: str, request: QueryRequest) -> None:
        if not request.cypher or not request.cypher.strip():
            raise InvalidQueryError(f"{action}: cypher must not be empty")

    def _read_timeout(self, request: QueryRequest) -> int:
        if request.timeout_seconds is None:
            return self._read_timeout_seconds
        if request.timeout_seconds <= 0:
            raise InvalidQueryError(
                f"read_tx: timeout_seconds must be positive, got {request.timeout_seconds}"
            )
        return request.timeout_seconds

    @staticmethod
    async def _bounded(awaitable: Awaitable[T], timeout: float) -> T:
        return await asyncio.wait_for(awaitable, timeout=timeout)

    def _failure(
        self,
        action: str,
        error: BaseException,
        *,
        timeout: float | None = None,
        summary: WriteSummary | None = None,
    ) -> TransactionError:
        """Classify a backend failure and wrap it in the normalized shape."""
        retryable = self._is_retryable(error)
        self._events.transaction_error(action, error, retryable)
        result = TxResult(summary=summary, retryable=retryable)
        if timeout is not None and isinstance(error, asyncio.TimeoutError):
            return TransactionTimeoutError(
                f"{action} timed out after {timeout}s",
                action=action,
                result=result,
                cause=error,
            )
        return TransactionError(
            f"{action} failed: {error}",
            action=action,
            result=result,
            cause=error,
        )

    # -------------------------------------------------------------------------
    # Managed transactions
    # -------------------------------------------------------------------------

    async def read_tx(self, request: QueryRequest) -> TxResult:
        """Run a managed read and return its records with timing statistics.

        The request timeout (default 30s) bounds the transaction on the
        server and the whole call on the client. All records are
        materialized before returning.

        Raises:
            InvalidQueryError: If the cypher is empty or the timeout is not positive
            TransactionTimeoutError: If the timeout elapses
            TransactionError: If the backend fails the read
        """
        action = "read_tx"
        self._validate(action, request)
        timeout = self._read_timeout(request)
        self._events.request(action, request)

        @unit_of_work(timeout=timeout)
        async def work(tx: Any) -> tuple[list[Any], DriverStats]:
            started = time.perf_counter()
            result = await tx.run(request.cypher, request.params)
            records = [record async for record in result]
            self._events.records(action, records)

            available_after = consumed_after = None
            try:
                summary = await result.consume()
            except Exception as e:
                # records are the primary result; stats fall back to wall clock
                self._events.consume_error(action, e)
            else:
                available_after = summary.result_available_after
                consumed_after = summary.result_consumed_after
            measured = timedelta(seconds=time.perf_counter() - started)
            return records, DriverStats.from_timings(
                measured, available_after, consumed_after
            )

        try:
            async with self._handle.session() as session:
                records, stats = await self._bounded(
                    session.execute_read(work), timeout
                )
        except GraphDriverError:
            raise
        except Exception as e:
            raise self._failure(action, e, timeout=timeout) from e

        return TxResult(records=records, stats=stats)

    async def write_commit_tx(self, request: QueryRequest) -> TxResult:
        """Run a managed write and return its mutation summary.

        No timeout override is applied; the backend's session defaults
        govern. Records are collected and logged but not returned.

        Raises:
            InvalidQueryError: If the cypher is empty
            TransactionError: If the write fails; ``error.result.summary``
                is zero-valued
        """
        action = "write_commit_tx"
        self._validate(action, request)
        self._events.request(action, request)

        async def work(tx: Any) -> WriteSummary:
            result = await tx.run(request.cypher, request.params)
            records = [record async for record in result]
            self._events.records(action, records)
            summary = await result.consume()
            self._events.counters(action, summary.counters)
            self._events.notifications(action, summary.summary_notifications)
            return WriteSummary.from_counters(summary.counters)

        try:
            async with self._handle.session() as session:
                write_summary = await session.execute_write(work)
        except GraphDriverError:
            raise
        except Exception as e:
            raise self._failure(action, e, summary=WriteSummary()) from e

        return TxResult(summary=write_summary)

    async def write_tx(self, request: QueryRequest) -> TxResult:
        """Managed write that drops the mutation summary."""
        result = await self.write_commit_tx(request)
        return TxResult(retryable=result.retryable)

    # -------------------------------------------------------------------------
    # Single-statement (auto-commit) transactions
    # -------------------------------------------------------------------------

    async def write_single_tx(self, request: QueryRequest) -> TxResult:
        """Run one auto-commit write statement.

        The backend does not re-run it on transient errors; the caller
        decides from ``error.retryable``. The timeout is fixed and the
        request override is ignored.

        Raises:
            InvalidQueryError: If the cypher is empty
            TransactionTimeoutError: If the fixed timeout elapses
            TransactionError: If the statement fails
        """
        action = "write_single_tx"
        self._validate(action, request)
        self._events.request(action, request)
        timeout = self._single_tx_timeout_seconds
        query = Query(request.cypher, timeout=timeout)

        async def run(session: Any) -> None:
            result = await session.run(query, request.params)
            records = [record async for record in result]
            self._events.records(action, records)
            summary = await result.consume()
            self._events.counters(action, summary.counters)
            self._events.notifications(action, summary.summary_notifications)

        try:
            async with self._handle.session() as session:
                await self._bounded(run(session), timeout)
        except GraphDriverError:
            raise
        except Exception as e:
            raise self._failure(action, e, timeout=timeout) from e

        return TxResult()

    async def read_single_tx(self, request: QueryRequest) -> TxResult:
        """Run one auto-commit read statement and return its records.

        Raises:
            InvalidQueryError: If the cypher is empty
            TransactionTimeoutError: If the fixed timeout elapses
            TransactionError: If the statement fails
        """
        action = "read_single_tx"
        self._validate(action, request)
        self._events.request(action, request)
        timeout = self._single_tx_timeout_seconds
        query = Query(request.cypher, timeout=timeout)

        async def run(session: Any) -> list[Any]:
            result = await session.run(query, request.params)
            records = [record async for record in result]
            self._events.records(action, records)
            return records

        try:
            async with self._handle.session() as session:
                records = await self._bounded(run(session), timeout)
        except GraphDriverError:
            raise
        except Exception as e:
            raise self._failure(action, e, timeout=timeout) from e

        return TxResult(records=records)
