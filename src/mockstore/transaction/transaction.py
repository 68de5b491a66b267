"""Transaction surface over the in-memory document store."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from mockstore.core.config import Settings, get_settings
from mockstore.core.decorators import log_execution
from mockstore.core.exceptions import DocumentNotFoundError, MockStoreValidationError
from mockstore.models.snapshots import ChangeType, DocumentSnapshot
from mockstore.ports.storage import DocumentPort, StorePort
from mockstore.transaction.commit import CommitCoordinator
from mockstore.transaction.log import TransactionLog, TransactionState
from mockstore.transaction.mutator import (
    apply_updates,
    merge_fields,
    parse_update_args,
    replace_fields,
)

logger = logging.getLogger(__name__)


class Transaction:
    """Reads first, then buffered writes, then one atomic-looking commit.

    Reads are only allowed before the first write. Writes are buffered per
    document path and land in storage when ``commit`` runs.
    """

    def __init__(self, store: StorePort, *, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or get_settings()
        self._log = TransactionLog()
        self._coordinator = CommitCoordinator(
            store, restore_on_failure=self.settings.restores_on_rollback()
        )

    def __repr__(self) -> str:
        return f"Transaction(state={self.state}, writes={len(self.pending_operations)})"

    @property
    def state(self) -> TransactionState:
        return self._log.state

    @property
    def modified(self) -> bool:
        return self._log.modified

    @property
    def pending_data(self) -> dict[str, dict[str, Any] | None]:
        return dict(self._log.pending_data)

    @property
    def pending_operations(self) -> dict[str, ChangeType]:
        return dict(self._log.pending_operations)

    async def get(self, ref: DocumentPort) -> DocumentSnapshot:
        """Read a document from storage.

        Raises:
            ReadAfterWriteError: If the transaction has already been written to
        """
        self._log.ensure_readable()
        return DocumentSnapshot.of(ref)

    def set(self, ref: DocumentPort, data: Mapping[str, Any], merge: bool = False) -> Transaction:
        """Write a whole document, or merge fields into it.

        Args:
            ref: Target document
            data: Fields of the document
            merge: Merge into the best-known data instead of replacing it

        Returns:
            This transaction, for chaining
        """
        self._log.ensure_open()
        if not isinstance(data, Mapping):
            msg = f"Document data must be a mapping, got {type(data).__name__}"
            raise MockStoreValidationError(msg, details={"path": ref.path})

        if merge:
            new_data = merge_fields(self._log.best_known_data(ref), data)
        else:
            new_data = replace_fields(data)
        kind = ChangeType.MODIFIED if ref.data is not None else ChangeType.ADDED
        self._log.record(ref.path, new_data, kind)
        return self

    def update(self, ref: DocumentPort, field_or_data: Any, *more_fields_and_values: Any) -> Transaction:
        """Update fields of an existing document.

        Accepts either a mapping of field paths to values, or alternating
        field path and value arguments. Dotted strings address nested fields.

        Raises:
            DocumentNotFoundError: If the document has no best-known data
            InvalidFieldPathError: If the arguments do not form field/value pairs
            IllegalFieldPathError: If a path descends through a non-mapping value
        """
        self._log.ensure_open()
        updates = parse_update_args(field_or_data, more_fields_and_values)
        current = self._log.best_known_data(ref)
        if current is None:
            raise DocumentNotFoundError(ref.path)
        self._log.record(ref.path, apply_updates(current, updates), ChangeType.MODIFIED)
        return self

    def delete(self, ref: DocumentPort) -> Transaction:
        self._log.ensure_open()
        self._log.record(ref.path, None, ChangeType.REMOVED)
        return self

    @log_execution(level=logging.INFO)
    async def commit(self) -> None:
        """Apply all buffered writes and notify listeners.

        Raises:
            TransactionClosedError: If already committed or rolled back
            Exception: Whatever failed during the commit, after rolling back
        """
        self._log.ensure_open()
        self._coordinator.commit(self._log, self._mark_rolled_back)
        self._log.state = TransactionState.COMMITTED

    def rollback(self) -> None:
        """Abandon the transaction; buffered writes are dropped."""
        if self._log.state is TransactionState.ROLLED_BACK:
            return
        self._log.ensure_open()
        self._mark_rolled_back()

    def _mark_rolled_back(self) -> None:
        logger.debug("Rolling back %r", self)
        self._log.state = TransactionState.ROLLED_BACK
