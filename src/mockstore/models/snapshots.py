"""Snapshot value types.

Snapshots are immutable point-in-time views. A ``DocumentSnapshot`` owns a
deep copy of the document data taken when it was created, so later writes to
the document never show through.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from mockstore.field_path import get_field
from mockstore.values import MISSING

if TYPE_CHECKING:
    from mockstore.ports.storage import DocumentPort

NOT_FOUND = -1


class ChangeType(StrEnum):
    """Kind of a document change."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True)
class DocumentSnapshot:
    """Data of one document at one point in time."""

    reference: DocumentPort
    _data: dict[str, Any] | None = field(repr=False)

    @classmethod
    def of(cls, reference: DocumentPort) -> DocumentSnapshot:
        """Snapshot the reference's current data."""
        return cls(reference, copy.deepcopy(reference.data))

    @classmethod
    def with_data(cls, reference: DocumentPort, data: dict[str, Any] | None) -> DocumentSnapshot:
        """Snapshot explicit data for the reference, e.g. its data before a removal."""
        return cls(reference, copy.deepcopy(data))

    @property
    def id(self) -> str:
        return self.reference.id

    @property
    def path(self) -> str:
        return self.reference.path

    @property
    def exists(self) -> bool:
        return self._data is not None

    @property
    def data(self) -> dict[str, Any] | None:
        """Read-only view used by the query engine; do not mutate."""
        return self._data

    def to_dict(self) -> dict[str, Any] | None:
        """Return a copy of the document data, None when it does not exist."""
        return copy.deepcopy(self._data)

    def get(self, field_path: Any, default: Any = None) -> Any:
        """Return the value at a field path, or ``default`` when absent."""
        value = get_field(self._data, field_path)
        return default if value is MISSING else copy.deepcopy(value)


@dataclass(frozen=True)
class DocumentChange:
    """One classified change; indices are -1 when not applicable."""

    type: ChangeType
    document: DocumentSnapshot
    old_index: int = NOT_FOUND
    new_index: int = NOT_FOUND


@dataclass(frozen=True)
class QuerySnapshot:
    """Result documents of a query together with the changes that led to them."""

    query: Any
    docs: tuple[DocumentSnapshot, ...] = ()
    changes: tuple[DocumentChange, ...] = ()

    @property
    def size(self) -> int:
        return len(self.docs)

    @property
    def empty(self) -> bool:
        return not self.docs

    def doc_changes(self) -> list[DocumentChange]:
        return list(self.changes)

    def __iter__(self) -> Iterator[DocumentSnapshot]:
        return iter(self.docs)

    def __len__(self) -> int:
        return len(self.docs)
