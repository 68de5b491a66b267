"""Query builder and live query.

A ``Query`` is an immutable value: ``where``, ``order_by``, ``limit`` and the
four cursor methods all return a new query and leave the receiver untouched.
Each query listens to its collection's raw change stream from construction
until ``reset()`` or until it is garbage collected, so that snapshot
listeners can be told about the changes that affect the query's own results.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
import logging
from typing import Any
import weakref

from mockstore.callbacks import CallbackHandler, SubscriptionHandle
from mockstore.core.decorators import log_execution
from mockstore.core.exceptions import InvalidLimitError, NotImplementedYetError
from mockstore.field_path import to_field_path
from mockstore.models.rules import (
    Direction,
    EndMode,
    EndRule,
    OrderRule,
    QueryRules,
    StartMode,
    StartRule,
    WhereRule,
)
from mockstore.models.snapshots import DocumentSnapshot, QuerySnapshot
from mockstore.ports.storage import CollectionPort
from mockstore.query.diff import diff_changes
from mockstore.query.evaluator import evaluate

logger = logging.getLogger(__name__)

QuerySnapshotCallback = Callable[[QuerySnapshot], Any]


class _CollectionFeed:
    """Forwards collection batches to a query without keeping it alive.

    A query with snapshot listeners is pinned here, so it keeps following the
    collection even when the caller dropped every reference to it.
    """

    __slots__ = ("_query", "pinned")

    def __init__(self, query: Query) -> None:
        self._query = weakref.ref(query)
        self.pinned: Query | None = None

    def __call__(self, snapshot: QuerySnapshot) -> None:
        query = self._query()
        if query is not None:
            query._handle_collection_change(snapshot)  # noqa: SLF001


class Query:
    """A filtered, ordered and bounded view over one collection."""

    def __init__(
        self,
        collection: CollectionPort,
        rules: QueryRules | None = None,
        *,
        isolate_listener_errors: bool = True,
    ) -> None:
        self.collection = collection
        self.rules = rules or QueryRules()
        self._isolate_listener_errors = isolate_listener_errors
        self._listeners: CallbackHandler[QuerySnapshot] = CallbackHandler(
            isolate_errors=isolate_listener_errors
        )
        self._documents = self._current_documents()
        self._generation = collection.generation
        self._feed = _CollectionFeed(self)
        self._release = weakref.finalize(self, collection.on_snapshot(self._feed))

    def __repr__(self) -> str:
        return f"Query(collection={self.collection.path!r}, rules={self.rules!r})"

    def reset(self) -> None:
        """Stop following the collection's change stream."""
        self._feed.pinned = None
        self._release()

    close = reset

    # ------------------------------------------------------------------
    # Refinements
    # ------------------------------------------------------------------

    def where(self, field_path: Any, op: str, value: Any) -> Query:
        """Create a new query that also requires ``field_path op value``.

        Args:
            field_path: Dotted string or FieldPath of the compared field
            op: Operator string ("<", "<=", "==", "!=", ">=", ">", "in",
                "not-in", "array-contains", "array-contains-any")
            value: Value to compare against

        Returns:
            The refined query
        """
        rule = WhereRule(field_path=to_field_path(field_path), op=op, value=value)
        return self._derive(self.rules.with_where(rule))

    def order_by(self, field_path: Any, direction: Any = Direction.ASCENDING) -> Query:
        """Create a new query additionally sorted by ``field_path``.

        Args:
            field_path: Dotted string or FieldPath to sort by
            direction: "asc" (default) or "desc"

        Returns:
            The refined query
        """
        rule = OrderRule(field_path=to_field_path(field_path), direction=Direction.parse(direction))
        return self._derive(self.rules.with_order(rule))

    def limit(self, count: int) -> Query:
        """Create a new query returning at most ``count`` documents.

        Raises:
            InvalidLimitError: If count is not a positive integer
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise InvalidLimitError(count)
        return self._derive(self.rules.with_limit(count))

    def limit_to_last(self, count: int) -> Query:
        raise NotImplementedYetError("Query.limit_to_last")

    def start_at(self, *field_values: Any) -> Query:
        """Create a new query starting at the document matching the cursor."""
        return self._derive(self.rules.with_start(StartRule(field_values=field_values, mode=StartMode.AT)))

    def start_after(self, *field_values: Any) -> Query:
        """Create a new query starting after the document matching the cursor."""
        return self._derive(self.rules.with_start(StartRule(field_values=field_values, mode=StartMode.AFTER)))

    def end_before(self, *field_values: Any) -> Query:
        """Create a new query ending before the document matching the cursor."""
        return self._derive(self.rules.with_end(EndRule(field_values=field_values, mode=EndMode.BEFORE)))

    def end_at(self, *field_values: Any) -> Query:
        """Create a new query ending at the document matching the cursor."""
        return self._derive(self.rules.with_end(EndRule(field_values=field_values, mode=EndMode.AT)))

    def with_converter(self, converter: Any) -> Query:
        raise NotImplementedYetError("Query.with_converter")

    def is_equal(self, other: Query) -> bool:
        """Check whether two queries target the same collection with the same rules."""
        return self.collection.path == other.collection.path and self.rules == other.rules

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @log_execution()
    async def get(self, options: Any = None) -> QuerySnapshot:
        """Execute the query against the collection's current documents.

        Args:
            options: Accepted for API compatibility, ignored

        Returns:
            Snapshot of the matching documents, without changes
        """
        documents = evaluate(self._current_documents(), self.rules)
        return QuerySnapshot(self, tuple(documents), ())

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Yield the matching documents one by one."""
        snapshot = await self.get()
        for document in snapshot.docs:
            yield document

    def on_snapshot(self, callback: QuerySnapshotCallback) -> SubscriptionHandle:
        """Listen for changes that affect this query's results.

        The callback runs once per upstream batch that touches the results,
        with the full new result and the changes scoped to this query.

        Args:
            callback: Called with a QuerySnapshot

        Returns:
            Handle that unsubscribes the callback when called

        Raises:
            NotImplementedYetError: If an observer object is given instead of a callable
            MockStoreValidationError: If the query rules cannot be evaluated
        """
        if not callable(callback):
            raise NotImplementedYetError("Query.on_snapshot with an observer object")
        evaluate(self._documents, self.rules)
        handle = self._listeners.add(callback)
        self._feed.pinned = self
        return handle

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _derive(self, rules: QueryRules) -> Query:
        return Query(self.collection, rules, isolate_listener_errors=self._isolate_listener_errors)

    def _current_documents(self) -> list[DocumentSnapshot]:
        return [DocumentSnapshot.of(ref) for ref in self.collection.document_refs()]

    def _handle_collection_change(self, snapshot: QuerySnapshot) -> None:
        previous_documents = self._documents
        if self._generation != self.collection.generation:
            # The collection was cleared since the cache was taken.
            previous_documents = []
            self._generation = self.collection.generation
        self._documents = list(snapshot.docs)
        if not self._listeners:
            self._feed.pinned = None
            return

        previous = evaluate(previous_documents, self.rules)
        current = evaluate(self._documents, self.rules)
        changes = diff_changes(previous, current, snapshot.changes)
        if not changes:
            logger.debug("Collection batch does not affect %r", self)
            return
        self._listeners.fire(QuerySnapshot(self, tuple(current), tuple(changes)))
