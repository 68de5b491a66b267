"""In-memory document store.

Documents live in a tree of collections addressed by slash-delimited paths:
``users/alice`` is a document, ``users/alice/posts`` a sub-collection. Every
reference is created once per path and cached, so listeners registered
through one reference see the writes made through another.

All writes, including the direct ``DocumentReference.set``/``update``/
``delete`` calls, run as transactions so listeners are notified the same way
whichever surface made the change.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
import copy
import inspect
import logging
from typing import Any, TypeVar
import uuid

from mockstore.callbacks import CallbackHandler, SubscriptionHandle
from mockstore.core.config import Settings, get_settings
from mockstore.core.exceptions import InvalidPathError, UnexpectedChangeTypeError
from mockstore.models.snapshots import (
    NOT_FOUND,
    ChangeType,
    DocumentChange,
    DocumentSnapshot,
    QuerySnapshot,
)
from mockstore.ports.storage import CollectionPort, DocumentPort, StorePort
from mockstore.query.query import Query
from mockstore.transaction.log import TransactionState
from mockstore.transaction.transaction import Transaction

logger = logging.getLogger(__name__)

R = TypeVar("R")

AUTO_ID_LENGTH = 20


def _split_path(path: str, expected: str) -> list[str]:
    if not isinstance(path, str) or not path.strip("/"):
        raise InvalidPathError(str(path), expected)
    segments = path.strip("/").split("/")
    if any(not segment for segment in segments):
        raise InvalidPathError(path, expected)
    parity = 0 if expected == "document" else 1
    if len(segments) % 2 != parity:
        raise InvalidPathError(path, expected)
    return segments


class DocumentReference(DocumentPort):
    """A document at a fixed path, present or not."""

    def __init__(self, store: MockStore, path: str) -> None:
        self._store = store
        self._path = path
        self._data: dict[str, Any] | None = None
        self._listeners: CallbackHandler[DocumentSnapshot] = CallbackHandler(
            isolate_errors=store.settings.isolate_listener_errors
        )

    def __repr__(self) -> str:
        return f"DocumentReference({self._path!r})"

    @property
    def id(self) -> str:
        return self._path.rpartition("/")[2]

    @property
    def path(self) -> str:
        return self._path

    @property
    def data(self) -> dict[str, Any] | None:
        return self._data

    @property
    def exists(self) -> bool:
        return self._data is not None

    @property
    def parent(self) -> CollectionReference:
        return self._store.collection(self._path.rpartition("/")[0])

    def collection(self, collection_id: str) -> CollectionReference:
        return self._store.collection(f"{self._path}/{collection_id}")

    async def get(self) -> DocumentSnapshot:
        return DocumentSnapshot.of(self)

    async def set(self, data: Mapping[str, Any], merge: bool = False) -> None:
        """Create or overwrite the document; with ``merge`` only the given fields change."""
        await self._store.transaction().set(self, data, merge=merge).commit()

    async def update(self, field_or_data: Any, *more_fields_and_values: Any) -> None:
        """Update fields of the existing document."""
        await self._store.transaction().update(self, field_or_data, *more_fields_and_values).commit()

    async def delete(self) -> None:
        await self._store.transaction().delete(self).commit()

    def on_snapshot(self, callback: Callable[[DocumentSnapshot], Any]) -> SubscriptionHandle:
        """Listen for committed changes of this document."""
        return self._listeners.add(callback)

    def commit_change(self, change_type: ChangeType, data: dict[str, Any] | None) -> DocumentChange:
        collection = self.parent
        old_index = collection.index_of(self.id)
        if change_type is ChangeType.MODIFIED and self._data is None:
            # Created earlier in the same transaction.
            change_type = ChangeType.ADDED
        match change_type:
            case ChangeType.ADDED | ChangeType.MODIFIED:
                self._data = copy.deepcopy(data)
                collection.track(self.id)
                document = DocumentSnapshot.of(self)
            case ChangeType.REMOVED:
                document = DocumentSnapshot.with_data(self, self._data)
                self._data = None
                collection.untrack(self.id)
            case _:
                raise UnexpectedChangeTypeError(change_type)
        logger.debug("Stored %s change of %s", change_type, self._path)
        return DocumentChange(change_type, document, old_index, collection.index_of(self.id))

    def fire_document_change_event(
        self, change_type: ChangeType, old_index: int, is_batch_tail: bool
    ) -> None:
        self._listeners.fire(DocumentSnapshot.of(self))
        if is_batch_tail:
            collection = self.parent
            change = DocumentChange(
                change_type, DocumentSnapshot.of(self), old_index, collection.index_of(self.id)
            )
            collection.fire_batch_document_change([change])

    def restore_data(self, data: dict[str, Any] | None) -> None:
        self._data = copy.deepcopy(data)
        if data is None:
            self.parent.untrack(self.id)
        else:
            self.parent.track(self.id)


class CollectionReference(CollectionPort):
    """A collection of documents, kept in the order they were created."""

    def __init__(self, store: MockStore, path: str) -> None:
        self._store = store
        self._path = path
        self._document_ids: list[str] = []
        self._generation = 0
        self._listeners: CallbackHandler[QuerySnapshot] = CallbackHandler(
            isolate_errors=store.settings.isolate_listener_errors
        )

    def __repr__(self) -> str:
        return f"CollectionReference({self._path!r})"

    @property
    def id(self) -> str:
        return self._path.rpartition("/")[2]

    @property
    def path(self) -> str:
        return self._path

    @property
    def parent(self) -> DocumentReference | None:
        """Owning document of a sub-collection, None for a root collection."""
        parent_path = self._path.rpartition("/")[0]
        return self._store.doc(parent_path) if parent_path else None

    @property
    def generation(self) -> int:
        return self._generation

    def document(self, document_id: str | None = None) -> DocumentReference:
        """Reference a document of this collection; a random id is used when omitted."""
        if document_id is None:
            document_id = uuid.uuid4().hex[:AUTO_ID_LENGTH]
        return self._store.doc(f"{self._path}/{document_id}")

    async def add(self, data: Mapping[str, Any]) -> DocumentReference:
        """Create a document with a random id."""
        ref = self.document()
        await ref.set(data)
        return ref

    def document_refs(self) -> list[DocumentReference]:
        return [self._store.doc(f"{self._path}/{document_id}") for document_id in self._document_ids]

    def index_of(self, document_id: str) -> int:
        try:
            return self._document_ids.index(document_id)
        except ValueError:
            return NOT_FOUND

    def track(self, document_id: str) -> None:
        if document_id not in self._document_ids:
            self._document_ids.append(document_id)

    def untrack(self, document_id: str) -> None:
        if document_id in self._document_ids:
            self._document_ids.remove(document_id)

    def clear(self) -> None:
        self._document_ids.clear()
        self._generation += 1

    def on_snapshot(self, callback: Callable[[QuerySnapshot], Any]) -> SubscriptionHandle:
        """Listen for every committed batch touching this collection."""
        return self._listeners.add(callback)

    def fire_batch_document_change(self, changes: list[DocumentChange]) -> None:
        docs = tuple(DocumentSnapshot.of(ref) for ref in self.document_refs())
        self._listeners.fire(QuerySnapshot(self, docs, tuple(changes)))

    # Query entry points

    def query(self) -> Query:
        return Query(self, isolate_listener_errors=self._store.settings.isolate_listener_errors)

    def where(self, field_path: Any, op: str, value: Any) -> Query:
        return self.query().where(field_path, op, value)

    def order_by(self, field_path: Any, direction: Any = "asc") -> Query:
        return self.query().order_by(field_path, direction)

    def limit(self, count: int) -> Query:
        return self.query().limit(count)

    def start_at(self, *field_values: Any) -> Query:
        return self.query().start_at(*field_values)

    def start_after(self, *field_values: Any) -> Query:
        return self.query().start_after(*field_values)

    def end_before(self, *field_values: Any) -> Query:
        return self.query().end_before(*field_values)

    def end_at(self, *field_values: Any) -> Query:
        return self.query().end_at(*field_values)

    async def get(self) -> QuerySnapshot:
        query = self.query()
        try:
            return await query.get()
        finally:
            query.reset()


class MockStore(StorePort):
    """Root of an in-memory document tree."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._documents: dict[str, DocumentReference] = {}
        self._collections: dict[str, CollectionReference] = {}
        logger.debug("MockStore created (rollback policy: %s)", self.settings.rollback_policy)

    def collection(self, path: str) -> CollectionReference:
        path = "/".join(_split_path(path, "collection"))
        if path not in self._collections:
            self._collections[path] = CollectionReference(self, path)
        return self._collections[path]

    def doc(self, path: str) -> DocumentReference:
        path = "/".join(_split_path(path, "document"))
        if path not in self._documents:
            self._documents[path] = DocumentReference(self, path)
        return self._documents[path]

    def transaction(self) -> Transaction:
        return Transaction(self, settings=self.settings)

    async def run_transaction(self, fn: Callable[[Transaction], R | Awaitable[R]]) -> R:
        """Run ``fn`` inside a new transaction and commit it.

        ``fn`` may be a plain function or a coroutine function. When it
        raises, the transaction is rolled back and the error propagates.
        """
        transaction = self.transaction()
        try:
            result = fn(transaction)
            if inspect.isawaitable(result):
                result = await result
            await transaction.commit()
        except Exception:
            if transaction.state is not TransactionState.COMMITTED:
                transaction.rollback()
            raise
        return result

    def reset(self) -> None:
        """Drop all document data; references and their listeners stay."""
        for document in self._documents.values():
            document._data = None  # noqa: SLF001
        for collection in self._collections.values():
            collection.clear()
        logger.debug("MockStore reset")
