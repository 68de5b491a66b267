"""Equality and ordering of document field values.

Values of different kinds are ordered by a fixed type rank, the same way the
hosted document store orders mixed-type fields:

    missing < None < bool < number < datetime < str < bytes
            < document reference < list < dict

Within a rank, numbers compare numerically (``int`` and ``float`` mix freely),
lists compare element-wise and dicts compare by their sorted items.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Final

from mockstore.ports.storage import DocumentPort


class _Missing:
    """Marker for a field that is absent from a document."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

RANK_MISSING = 0
RANK_NULL = 1
RANK_BOOL = 2
RANK_NUMBER = 3
RANK_TIMESTAMP = 4
RANK_STRING = 5
RANK_BYTES = 6
RANK_REFERENCE = 7
RANK_ARRAY = 8
RANK_MAP = 9


def type_rank(value: Any) -> int:
    """Return the ordering rank of a value's kind."""
    if value is MISSING:
        return RANK_MISSING
    if value is None:
        return RANK_NULL
    # bool is a subclass of int, test it first
    if isinstance(value, bool):
        return RANK_BOOL
    if isinstance(value, (int, float)):
        return RANK_NUMBER
    if isinstance(value, datetime):
        return RANK_TIMESTAMP
    if isinstance(value, str):
        return RANK_STRING
    if isinstance(value, (bytes, bytearray)):
        return RANK_BYTES
    if isinstance(value, DocumentPort):
        return RANK_REFERENCE
    if isinstance(value, Mapping):
        return RANK_MAP
    if isinstance(value, Sequence):
        return RANK_ARRAY
    msg = f"Unsupported field value type: {type(value).__name__}"
    raise TypeError(msg)


def _cmp(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def compare_values(left: Any, right: Any) -> int:
    """Three-way comparison of two field values.

    Returns a negative number, zero or a positive number when ``left`` sorts
    before, together with or after ``right``.
    """
    left_rank = type_rank(left)
    right_rank = type_rank(right)
    if left_rank != right_rank:
        return _cmp(left_rank, right_rank)

    if left_rank in (RANK_MISSING, RANK_NULL):
        return 0
    if left_rank == RANK_REFERENCE:
        return _cmp(left.path, right.path)
    if left_rank == RANK_ARRAY:
        for left_item, right_item in zip(left, right):
            result = compare_values(left_item, right_item)
            if result:
                return result
        return _cmp(len(left), len(right))
    if left_rank == RANK_MAP:
        left_keys = sorted(left)
        right_keys = sorted(right)
        for left_key, right_key in zip(left_keys, right_keys):
            if left_key != right_key:
                return _cmp(left_key, right_key)
            result = compare_values(left[left_key], right[right_key])
            if result:
                return result
        return _cmp(len(left_keys), len(right_keys))
    return _cmp(left, right)


def values_equal(left: Any, right: Any) -> bool:
    """Equality used by ``==`` filters, cursors and array sentinels."""
    return compare_values(left, right) == 0


def same_kind(left: Any, right: Any) -> bool:
    """Check whether two values belong to the same ordering rank."""
    return type_rank(left) == type_rank(right)
