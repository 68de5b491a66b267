"""Pending writes of one transaction."""

from __future__ import annotations

from enum import StrEnum
import logging
from typing import Any

from mockstore.core.exceptions import ReadAfterWriteError, TransactionClosedError
from mockstore.models.snapshots import ChangeType
from mockstore.ports.storage import DocumentPort

logger = logging.getLogger(__name__)


class TransactionState(StrEnum):
    """Lifecycle of a transaction."""

    OPEN_READABLE = "open_readable"
    OPEN_WRITE_ONLY = "open_write_only"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionLog:
    """Per-path pending data and operation kinds, last write wins.

    Insertion order of paths is kept, so commit applies writes in the order
    each path was first written.
    """

    def __init__(self) -> None:
        self.state = TransactionState.OPEN_READABLE
        self.pending_data: dict[str, dict[str, Any] | None] = {}
        self.pending_operations: dict[str, ChangeType] = {}

    @property
    def modified(self) -> bool:
        """True once any write has been recorded."""
        return self.state is not TransactionState.OPEN_READABLE

    @property
    def closed(self) -> bool:
        return self.state in (TransactionState.COMMITTED, TransactionState.ROLLED_BACK)

    def ensure_open(self) -> None:
        if self.closed:
            raise TransactionClosedError(self.state.value)

    def ensure_readable(self) -> None:
        self.ensure_open()
        if self.state is TransactionState.OPEN_WRITE_ONLY:
            raise ReadAfterWriteError

    def best_known_data(self, ref: DocumentPort) -> dict[str, Any] | None:
        """Pending data for the path if written in this transaction, else storage data."""
        if ref.path in self.pending_data:
            return self.pending_data[ref.path]
        return ref.data

    def record(self, path: str, data: dict[str, Any] | None, kind: ChangeType) -> None:
        self.ensure_open()
        self.state = TransactionState.OPEN_WRITE_ONLY
        self.pending_data[path] = data
        self.pending_operations[path] = kind
        logger.debug("Recorded %s write for %s", kind, path)

    def items(self) -> list[tuple[str, ChangeType, dict[str, Any] | None]]:
        return [
            (path, kind, self.pending_data[path])
            for path, kind in self.pending_operations.items()
        ]
