"""
Custom exceptions for the dbdriver module.

Exception naming avoids shadowing Python builtins (ConnectionError,
TimeoutError): every error raised by this package derives from
GraphDriverError and keeps the backend exception as ``cause``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.dbdriver.models import TxResult


class GraphDriverError(Exception):
    """Base exception for all graph driver errors."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        """Initialize with message and optional cause.

        Args:
            message: Human-readable error description
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class DriverConfigurationError(GraphDriverError):
    """Raised when the driver handle cannot be constructed.

    Covers unknown dialect modes, malformed Bolt URLs and rejected
    auth configuration. Raised from the constructor, never deferred.
    """


class DriverConnectionError(GraphDriverError):
    """Raised when the backend cannot be reached or rejects the handshake."""


class DriverClosedError(GraphDriverError):
    """Raised when a handle is used after close()."""


class InvalidQueryError(GraphDriverError):
    """Raised before any session is acquired when a request is unusable."""


class TransactionError(GraphDriverError):
    """Raised when the backend fails a transaction.

    Carries the normalized result shape so callers can inspect the
    retry classification and any partial write summary the same way
    for every execution mode.
    """

    def __init__(
        self,
        message: str,
        *,
        action: str,
        result: TxResult,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with the failed action and its partial result.

        Args:
            message: Human-readable error description
            action: Execution mode that failed (e.g. "write_commit_tx")
            result: Partial TxResult; ``result.retryable`` holds the classification
            cause: Backend exception that caused this error
        """
        super().__init__(message, cause=cause)
        self.action = action
        self.result = result

    @property
    def retryable(self) -> bool:
        """True if re-running the identical request is safe."""
        return self.result.retryable


class TransactionTimeoutError(TransactionError):
    """Raised when a transaction exceeds its client-side timeout."""
