"""Sentinel field values resolved while a write is applied.

A sentinel is a mutation instruction rather than a literal value: it tells
the writer to delete a field, stamp the commit time, add to a counter or
edit an array in place. ``FieldValue`` builds them and ``resolve_sentinel``
applies one to its target location.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
import logging
from typing import Any

from mockstore.values import values_equal

logger = logging.getLogger(__name__)


class SentinelKind(StrEnum):
    """Kinds of mutation instruction."""

    DELETE = "delete"
    SERVER_TIMESTAMP = "server_timestamp"
    INCREMENT = "increment"
    ARRAY_UNION = "array_union"
    ARRAY_REMOVE = "array_remove"


@dataclass(frozen=True)
class Sentinel:
    """A mutation instruction with its arguments."""

    kind: SentinelKind
    args: tuple[Any, ...] = ()


class FieldValue:
    """Factory for sentinel values, mirroring the client SDK."""

    @staticmethod
    def delete() -> Sentinel:
        return Sentinel(SentinelKind.DELETE)

    @staticmethod
    def server_timestamp() -> Sentinel:
        return Sentinel(SentinelKind.SERVER_TIMESTAMP)

    @staticmethod
    def increment(amount: int | float) -> Sentinel:
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            msg = f"increment() expects a number, got {type(amount).__name__}"
            raise TypeError(msg)
        return Sentinel(SentinelKind.INCREMENT, (amount,))

    @staticmethod
    def array_union(*elements: Any) -> Sentinel:
        return Sentinel(SentinelKind.ARRAY_UNION, elements)

    @staticmethod
    def array_remove(*elements: Any) -> Sentinel:
        return Sentinel(SentinelKind.ARRAY_REMOVE, elements)


def resolve_sentinel(parent: dict[str, Any], key: str, sentinel: Sentinel) -> None:
    """Apply a sentinel to ``parent[key]`` in place.

    ``parent`` is the container inside the new document data that owns the
    final path segment; it already holds the pre-write value, if any.
    """
    current = parent.get(key)
    match sentinel.kind:
        case SentinelKind.DELETE:
            parent.pop(key, None)
        case SentinelKind.SERVER_TIMESTAMP:
            parent[key] = datetime.now(UTC)
        case SentinelKind.INCREMENT:
            (amount,) = sentinel.args
            if isinstance(current, bool) or not isinstance(current, (int, float)):
                parent[key] = amount
            else:
                parent[key] = current + amount
        case SentinelKind.ARRAY_UNION:
            result = list(current) if isinstance(current, list) else []
            for element in sentinel.args:
                if not any(values_equal(element, existing) for existing in result):
                    result.append(element)
            parent[key] = result
        case SentinelKind.ARRAY_REMOVE:
            existing = current if isinstance(current, list) else []
            parent[key] = [
                item
                for item in existing
                if not any(values_equal(item, element) for element in sentinel.args)
            ]
    logger.debug("Resolved %s sentinel for field %s", sentinel.kind, key)
