"""Cursor resolution for start/end bounds.

A cursor is a tuple of field values, one per order rule. Resolving it means
finding the first document of the ordered result whose order fields equal
the cursor values positionally. A cursor that matches nothing is not an
error: callers leave the result untouched.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mockstore.field_path import DottedPath, FieldPath, get_field
from mockstore.models.rules import OrderRule
from mockstore.models.snapshots import NOT_FOUND, DocumentSnapshot
from mockstore.query.filtering import HasData
from mockstore.values import MISSING, values_equal


def cursor_values(field_values: Sequence[Any], order: Sequence[OrderRule]) -> tuple[Any, ...]:
    """Expand a document snapshot cursor into its values for the order fields."""
    if len(field_values) == 1 and isinstance(field_values[0], DocumentSnapshot):
        snapshot = field_values[0]
        return tuple(get_field(snapshot.data, rule.field_path) for rule in order)
    return tuple(field_values)


def locate(
    documents: Sequence[HasData],
    field_paths: Sequence[DottedPath | FieldPath],
    values: Sequence[Any],
) -> int:
    """Return the index of the first document matching the cursor, or NOT_FOUND."""
    for index, document in enumerate(documents):
        if all(
            _field_matches(get_field(document.data, path), value)
            for path, value in zip(field_paths, values, strict=True)
        ):
            return index
    return NOT_FOUND


def _field_matches(field_value: Any, cursor_value: Any) -> bool:
    if field_value is MISSING or cursor_value is MISSING:
        return False
    return values_equal(field_value, cursor_value)
