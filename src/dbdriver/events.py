"""
Structured log events emitted by the transaction executor.

Events go to an injected ``logging.Logger`` with their fields in
``extra`` so the JSON formatter in src.core.logging renders them as
top-level keys. Logging never changes control flow or error
classification.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from src.core.logging import get_logger
from src.dbdriver.models import QueryRequest

_COUNTER_FIELDS = (
    "nodes_created",
    "nodes_deleted",
    "relationships_created",
    "relationships_deleted",
    "properties_set",
    "labels_added",
    "labels_removed",
    "indexes_added",
    "indexes_removed",
    "constraints_added",
    "constraints_removed",
)


class DriverEventLogger:
    """Emits the executor's request, result and error events."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger("graph-dbdriver.executor")

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def request(self, action: str, request: QueryRequest) -> None:
        """Log the query text and parameters before the run."""
        params = " ".join(f"{key}={value}" for key, value in request.params.items())
        self._logger.info(
            "DB Request '%s'\ncypher=\n  %s\nparams=%s",
            action,
            request.cypher,
            params,
            extra={
                "event": "db_request",
                "action": action,
                "cypher": request.cypher,
                "params": dict(request.params),
            },
        )

    def records(self, action: str, records: Iterable[Any]) -> None:
        if not self._logger.isEnabledFor(logging.DEBUG):
            return
        for index, record in enumerate(records):
            self._logger.debug(
                "DB Record %d: %r",
                index,
                record,
                extra={"event": "db_record", "action": action, "index": index},
            )

    def counters(self, action: str, counters: Any) -> None:
        """Log every backend counter plus the node/relationship aggregate."""
        fields = {name: getattr(counters, name, 0) for name in _COUNTER_FIELDS}
        changed = (
            fields["nodes_created"]
            + fields["nodes_deleted"]
            + fields["relationships_created"]
            + fields["relationships_deleted"]
        )
        self._logger.info(
            "DB Counters",
            extra={
                "event": "db_counters",
                "action": action,
                "changed_nodes_relationships": changed,
                "changed_properties": fields["properties_set"],
                **fields,
            },
        )

    def notifications(self, action: str, notifications: Iterable[Any]) -> None:
        for index, notification in enumerate(notifications or ()):
            self._logger.info(
                "DB Notification",
                extra={
                    "event": "db_notification",
                    "action": action,
                    "index": index,
                    "code": notification.code,
                    "title": notification.title,
                    "description": notification.description,
                    "position": notification.position,
                    "severity": notification.severity_level,
                },
            )

    def transaction_error(
        self, action: str, error: BaseException, retryable: bool
    ) -> None:
        self._logger.error(
            "DB transaction error in %s: %s",
            action,
            error,
            extra={
                "event": "db_transaction_error",
                "action": action,
                "error": str(error),
                "retryable": retryable,
            },
        )

    def consume_error(self, action: str, error: BaseException) -> None:
        """Log a failure to read trailing metadata after a successful run."""
        self._logger.error(
            "DB consume error in %s: %s",
            action,
            error,
            exc_info=error,
            extra={"event": "db_consume_error", "action": action, "error": str(error)},
        )
