"""Scoping of upstream collection changes to one query's result set.

The collection reports every change with indices into the raw collection.
A query only cares about changes that touch its own results, and reports
them with indices into its own ordering.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Protocol

from mockstore.core.exceptions import UnexpectedChangeTypeError
from mockstore.models.snapshots import NOT_FOUND, ChangeType, DocumentChange

logger = logging.getLogger(__name__)


class HasId(Protocol):
    @property
    def id(self) -> str: ...


def _index_of(documents: Sequence[HasId], doc_id: str) -> int:
    for index, document in enumerate(documents):
        if document.id == doc_id:
            return index
    return NOT_FOUND


def diff_changes(
    previous: Sequence[HasId],
    current: Sequence[HasId],
    upstream: Sequence[DocumentChange],
) -> list[DocumentChange]:
    """Reclassify upstream changes against the previous and current results.

    Modified and removed documents are kept when they were part of the
    previous result, added documents when they are part of the current one.
    """
    changes: list[DocumentChange] = []
    for change in upstream:
        doc_id = change.document.id
        old_index = _index_of(previous, doc_id)
        new_index = _index_of(current, doc_id)

        match change.type:
            case ChangeType.MODIFIED | ChangeType.REMOVED:
                relevant = old_index != NOT_FOUND
            case ChangeType.ADDED:
                relevant = new_index != NOT_FOUND
            case _:
                raise UnexpectedChangeTypeError(change.type)

        if relevant:
            changes.append(
                DocumentChange(
                    type=change.type,
                    document=change.document,
                    old_index=old_index,
                    new_index=new_index,
                )
            )

    logger.debug("Kept %d of %d upstream changes", len(changes), len(upstream))
    return changes
