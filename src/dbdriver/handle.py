"""
Driver handle owning the backend connection pool.

One DriverHandle wraps one ``neo4j.AsyncDriver`` for the life of the
process. Sessions are handed out per call and never retained; the pool
behind them belongs to the neo4j driver.

Usage:
    # Fail fast: construct and verify in one step
    handle = await DriverHandle.connect(DriverMode.NEO4J, params)

    # As async context manager
    async with DriverHandle(DriverMode.MEMGRAPH, params) as handle:
        ...
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from neo4j import AsyncGraphDatabase

from src.core.logging import get_logger
from src.dbdriver.exceptions import (
    DriverClosedError,
    DriverConfigurationError,
    DriverConnectionError,
)
from src.dbdriver.models import DriverMode, DriverParams

if TYPE_CHECKING:
    from neo4j import AsyncDriver, AsyncSession


class DriverHandle:
    """Process-scoped owner of the backend driver and its dialect tag."""

    def __init__(
        self,
        mode: DriverMode | str,
        params: DriverParams,
        *,
        database: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Create the backend driver.

        Args:
            mode: Backend dialect ("neo4j" or "memgraph")
            params: Host, port and credentials
            database: Database name for Neo4j sessions (ignored for Memgraph)
            logger: Logger for lifecycle events

        Raises:
            DriverConfigurationError: If the mode is unknown or the backend
                driver rejects the URL or auth configuration.
        """
        try:
            self._mode = DriverMode(mode)
        except ValueError as e:
            raise DriverConfigurationError(
                f"Unsupported driver mode: {mode!r}", cause=e
            ) from e

        self._params = params
        self._database = database if self._mode is DriverMode.NEO4J else None
        self._logger = logger or get_logger("graph-dbdriver.handle")
        self._closed = False

        try:
            self._driver: AsyncDriver = AsyncGraphDatabase.driver(
                params.url,
                auth=(params.user, params.password),
            )
        except Exception as e:
            raise DriverConfigurationError(
                f"Failed to create driver for {params.url}: {e}",
                cause=e,
            ) from e

    @classmethod
    async def connect(
        cls,
        mode: DriverMode | str,
        params: DriverParams,
        *,
        database: str | None = None,
        logger: logging.Logger | None = None,
    ) -> DriverHandle:
        """Construct a handle and verify connectivity before returning it.

        Raises:
            DriverConfigurationError: If construction fails.
            DriverConnectionError: If the backend is unreachable; the
                half-built handle is closed before raising.
        """
        handle = cls(mode, params, database=database, logger=logger)
        try:
            await handle.verify_connectivity()
        except DriverConnectionError:
            await handle.close()
            raise
        return handle

    @property
    def url(self) -> str:
        return self._params.url

    @property
    def database(self) -> str | None:
        return self._database

    @property
    def is_closed(self) -> bool:
        return self._closed

    def get_mode(self) -> str:
        """Return the dialect tag callers branch on for syntax differences."""
        return self._mode.value

    def _ensure_open(self) -> None:
        if self._closed:
            raise DriverClosedError("Driver handle is closed.")

    def session(self) -> AsyncSession:
        """Return a fresh session for use as an async context manager."""
        self._ensure_open()
        kwargs: dict[str, Any] = {}
        if self._database is not None:
            kwargs["database"] = self._database
        return self._driver.session(**kwargs)

    async def verify_connectivity(self) -> None:
        """Ping the backend using the existing driver.

        Raises:
            DriverClosedError: If the handle was closed.
            DriverConnectionError: If the backend cannot be reached.
        """
        self._ensure_open()
        try:
            await self._driver.verify_connectivity()
        except Exception as e:
            raise DriverConnectionError(
                f"Failed to connect to {self._mode.value} at {self.url}",
                cause=e,
            ) from e

    async def close(self) -> None:
        """Release all pooled connections.

        A second call is a no-op.
        """
        if self._closed:
            self._logger.warning("Driver handle already closed.")
            return
        self._logger.info(
            "Closing driver and underlying connections!",
            extra={"event": "db_close", "mode": self._mode.value},
        )
        self._closed = True
        await self._driver.close()

    async def __aenter__(self) -> DriverHandle:
        """Async context manager entry - verify connectivity."""
        await self.verify_connectivity()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit - close the driver."""
        await self.close()
