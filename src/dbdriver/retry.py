"""
Retry classification for backend failures.

The neo4j driver marks transient failures (deadlocks, leader switches,
expired sessions, unreachable routers) through ``is_retryable()`` on its
exception types. Anything that does not expose that method is treated as
non-retryable.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RetryClassifier(Protocol):
    """Callable deciding whether a failure is safe to retry verbatim."""

    def __call__(self, error: BaseException) -> bool: ...


def is_retryable(error: BaseException | None) -> bool:
    """Return True if the backend reports the failure as retryable."""
    if error is None:
        return False
    check = getattr(error, "is_retryable", None)
    if not callable(check):
        return False
    return bool(check())
