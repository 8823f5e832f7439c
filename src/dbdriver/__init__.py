# Driver module for Bolt graph backends
"""
Transaction execution layer for Neo4j and Memgraph including:
- DriverHandle: owner of the backend connection pool and dialect tag
- TransactionExecutor: managed and single-statement read/write modes
- QueryRequest / TxResult / DriverStats / WriteSummary: value objects
- is_retryable: default retry classifier
"""

from src.dbdriver.exceptions import (
    DriverClosedError,
    DriverConfigurationError,
    DriverConnectionError,
    GraphDriverError,
    InvalidQueryError,
    TransactionError,
    TransactionTimeoutError,
)
from src.dbdriver.executor import GraphDriverProtocol, TransactionExecutor
from src.dbdriver.handle import DriverHandle
from src.dbdriver.models import (
    READ_TX_TIMEOUT_SECONDS,
    SINGLE_TX_TIMEOUT_SECONDS,
    DriverMode,
    DriverParams,
    DriverStats,
    QueryRequest,
    TxResult,
    WriteSummary,
)
from src.dbdriver.retry import RetryClassifier, is_retryable

__all__ = [
    # Exceptions
    "GraphDriverError",
    "DriverConfigurationError",
    "DriverConnectionError",
    "DriverClosedError",
    "InvalidQueryError",
    "TransactionError",
    "TransactionTimeoutError",
    # Handle & executor
    "DriverHandle",
    "TransactionExecutor",
    "GraphDriverProtocol",
    # Models
    "DriverMode",
    "DriverParams",
    "QueryRequest",
    "DriverStats",
    "WriteSummary",
    "TxResult",
    "READ_TX_TIMEOUT_SECONDS",
    "SINGLE_TX_TIMEOUT_SECONDS",
    # Retry
    "RetryClassifier",
    "is_retryable",
]
