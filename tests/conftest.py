"""
Pytest configuration and fixtures for graph-dbdriver tests.
"""

import logging
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from src.core.config import Settings
from src.dbdriver.executor import TransactionExecutor
from src.dbdriver.handle import DriverHandle
from src.dbdriver.models import DriverMode, DriverParams
from tests.fakes import FakeBackendDriver, RecordingHandler


@pytest.fixture
def settings() -> Settings:
    """Provide test settings for a local Neo4j."""
    return Settings(
        graph_mode="neo4j",
        graph_host="localhost",
        graph_port=7687,
        graph_user="neo4j",
        graph_password="testpassword",
        graph_database="neo4j",
    )


@pytest.fixture
def driver_params() -> DriverParams:
    return DriverParams(host="localhost", user="neo4j", password="testpassword", port=7687)


@pytest.fixture
def backend() -> FakeBackendDriver:
    """Fake neo4j async driver counting sessions."""
    return FakeBackendDriver()


@pytest.fixture
def log_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def recording_logger(request: pytest.FixtureRequest, log_handler: RecordingHandler) -> Iterator[logging.Logger]:
    """Logger injected into the executor; records stay out of global output."""
    logger = logging.getLogger(f"graph-dbdriver.test.{request.node.name}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(log_handler)
    yield logger
    logger.removeHandler(log_handler)


@pytest.fixture
def handle(
    backend: FakeBackendDriver,
    driver_params: DriverParams,
    recording_logger: logging.Logger,
) -> DriverHandle:
    """DriverHandle whose backend driver is the fake."""
    with patch("src.dbdriver.handle.AsyncGraphDatabase") as mock_async_db:
        mock_async_db.driver.return_value = backend
        return DriverHandle(
            DriverMode.NEO4J,
            driver_params,
            database="neo4j",
            logger=recording_logger,
        )


@pytest.fixture
def executor(handle: DriverHandle, recording_logger: logging.Logger) -> TransactionExecutor:
    return TransactionExecutor(handle, logger=recording_logger)
