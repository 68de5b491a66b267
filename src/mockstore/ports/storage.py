"""Storage port interfaces used by the query and transaction engines.

The engines never touch raw storage directly. They read and write through
these contracts, so the in-memory storage in ``mockstore.storage`` can be
swapped for another implementation without changing the engines.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mockstore.models.snapshots import ChangeType, DocumentChange, QuerySnapshot


class DocumentPort(ABC):
    """Abstract interface for a single document at a stable path.

    Holds the current data of the document, or None when the document does
    not exist.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """The last segment of the document path."""

    @property
    @abstractmethod
    def path(self) -> str:
        """The slash-delimited path of the document."""

    @property
    @abstractmethod
    def data(self) -> dict[str, Any] | None:
        """Current data of the document, None when absent."""

    @abstractmethod
    def commit_change(
        self, change_type: ChangeType, data: dict[str, Any] | None
    ) -> DocumentChange:
        """Write data to storage and record the resulting change.

        Args:
            change_type: Kind of the write (added, modified or removed)
            data: New document data, None for removals

        Returns:
            The confirmed change, with indices relative to the owning collection
        """

    @abstractmethod
    def fire_document_change_event(
        self, change_type: ChangeType, old_index: int, is_batch_tail: bool
    ) -> None:
        """Notify document listeners of a committed change.

        Args:
            change_type: Kind of the committed change
            old_index: Index of the document in its collection before the change
            is_batch_tail: Whether to also fire a one-change collection batch
        """

    @abstractmethod
    def restore_data(self, data: dict[str, Any] | None) -> None:
        """Put back earlier data without recording a change or notifying anyone.

        Args:
            data: Data to restore, None to make the document absent again
        """


class CollectionPort(ABC):
    """Abstract interface for a collection of documents.

    Represents a collection reference that lists its documents in a stable
    order and broadcasts batches of changes to its subscribers.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """The last segment of the collection path."""

    @property
    @abstractmethod
    def path(self) -> str:
        """The slash-delimited path of the collection."""

    @property
    @abstractmethod
    def generation(self) -> int:
        """Counter bumped every time the collection is cleared without notification."""

    @abstractmethod
    def document_refs(self) -> list[DocumentPort]:
        """Existing documents of the collection, in collection order."""

    @abstractmethod
    def on_snapshot(self, callback: Callable[[QuerySnapshot], None]) -> Callable[[], None]:
        """Subscribe to raw change batches of the collection.

        Args:
            callback: Called with a snapshot of the whole collection and the
                changes of one batch

        Returns:
            A handle that unsubscribes when called
        """

    @abstractmethod
    def fire_batch_document_change(self, changes: Sequence[DocumentChange]) -> None:
        """Broadcast one batch of committed changes to subscribers.

        Args:
            changes: Changes of the batch, in commit order
        """


class StorePort(ABC):
    """Abstract interface for the root of the document tree.

    Resolves slash-delimited paths into document and collection references.
    """

    @abstractmethod
    def doc(self, path: str) -> DocumentPort:
        """Get the document reference at a path.

        Args:
            path: Document path with an even number of segments

        Returns:
            The document reference, whether or not the document exists
        """

    @abstractmethod
    def collection(self, path: str) -> CollectionPort:
        """Get the collection reference at a path.

        Args:
            path: Collection path with an odd number of segments

        Returns:
            The collection reference
        """
