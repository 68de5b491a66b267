"""Applying a transaction's pending writes and broadcasting the result."""

from __future__ import annotations

from collections.abc import Callable
import copy
import logging
from typing import Any

from mockstore.models.snapshots import DocumentChange
from mockstore.ports.storage import DocumentPort, StorePort
from mockstore.transaction.log import TransactionLog

logger = logging.getLogger(__name__)


def collection_path_of(document_path: str) -> str:
    """Path of the collection that owns a document path."""
    return document_path.rpartition("/")[0]


class CommitCoordinator:
    """Writes pending data to storage and notifies listeners.

    All writes are applied first. Afterwards every changed document is told
    about its own change, then every touched collection receives its changes
    as a single batch. Notifications never start before all writes landed.
    """

    def __init__(self, store: StorePort, *, restore_on_failure: bool = False) -> None:
        self.store = store
        self.restore_on_failure = restore_on_failure

    def commit(self, log: TransactionLog, rollback: Callable[[], None]) -> dict[str, list[DocumentChange]]:
        """Apply ``log`` and broadcast it.

        On any error the already applied writes are put back (only when
        ``restore_on_failure`` is set), ``rollback`` is called and the error is
        re-raised unchanged.

        Returns:
            The confirmed changes grouped by collection path
        """
        applied: list[tuple[DocumentPort, dict[str, Any] | None]] = []
        try:
            batches: dict[str, list[DocumentChange]] = {}
            for path, kind, data in log.items():
                document = self.store.doc(path)
                previous = copy.deepcopy(document.data)
                change = document.commit_change(kind, data)
                applied.append((document, previous))
                batches.setdefault(collection_path_of(path), []).append(change)

            for collection_path, changes in batches.items():
                for change in changes:
                    change.document.reference.fire_document_change_event(
                        change.type, change.old_index, False
                    )
                self.store.collection(collection_path).fire_batch_document_change(changes)
        except Exception:
            logger.exception("Commit failed after %d applied write(s)", len(applied))
            if self.restore_on_failure:
                self._restore(applied)
            rollback()
            raise

        logger.info(
            "Committed %d write(s) across %d collection(s)",
            len(applied),
            len(batches),
        )
        return batches

    @staticmethod
    def _restore(applied: list[tuple[DocumentPort, dict[str, Any] | None]]) -> None:
        for document, previous in reversed(applied):
            document.restore_data(previous)
        logger.warning("Restored pre-commit data of %d document(s)", len(applied))
