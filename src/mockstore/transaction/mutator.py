"""Field-level mutation of document data.

Writes are applied to a private copy of the document data. A field path is
walked segment by segment, creating empty maps for missing intermediate
segments; descending through a scalar is rejected. The final segment receives
either the literal value or the result of resolving a sentinel.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import copy
from typing import Any

from mockstore.core.exceptions import FieldValueError, IllegalFieldPathError, InvalidFieldPathError
from mockstore.field_path import DottedPath, FieldPath, FieldPathSpec, field_segments
from mockstore.field_values import Sentinel, SentinelKind, resolve_sentinel

FieldUpdate = tuple[FieldPathSpec, Any]


def _check_key(key: Any) -> str:
    if not isinstance(key, str) or not key:
        msg = f"Invalid field name: {key!r}"
        raise InvalidFieldPathError(msg, field_path=key)
    return key


def assign_value(parent: dict[str, Any], key: str, value: Any, *, allow_delete: bool = True) -> None:
    """Store one value, or resolve one sentinel, at ``parent[key]``."""
    match value:
        case Sentinel(kind=SentinelKind.DELETE) if not allow_delete:
            msg = f"FieldValue.delete() is only allowed in updates and merges (field '{key}')"
            raise FieldValueError(msg, details={"field": key})
        case Sentinel():
            resolve_sentinel(parent, key, value)
        case Mapping():
            nested: dict[str, Any] = {}
            for nested_key, nested_value in value.items():
                assign_value(nested, _check_key(nested_key), nested_value, allow_delete=False)
            parent[key] = nested
        case _:
            parent[key] = copy.deepcopy(value)


def apply_field(target: dict[str, Any], field_path: FieldPathSpec, value: Any) -> None:
    """Write ``value`` at ``field_path`` inside ``target``, in place."""
    segments = field_segments(field_path)
    parent = target
    for segment in segments[:-1]:
        child = parent.get(segment)
        if child is None:
            child = {}
            parent[segment] = child
        elif not isinstance(child, dict):
            raise IllegalFieldPathError(segment, type(child).__name__)
        parent = child
    assign_value(parent, segments[-1], value)


def apply_updates(data: Mapping[str, Any], updates: Sequence[FieldUpdate]) -> dict[str, Any]:
    """Return a deep copy of ``data`` with every field update applied."""
    result = copy.deepcopy(dict(data))
    for field_path, value in updates:
        apply_field(result, field_path, value)
    return result


def replace_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Build document data for a replacing set; keys are taken literally."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        assign_value(result, _check_key(key), value, allow_delete=False)
    return result


def merge_fields(base: Mapping[str, Any] | None, data: Mapping[str, Any]) -> dict[str, Any]:
    """Build document data for a merging set; nested maps merge recursively."""
    result = copy.deepcopy(dict(base or {}))
    _merge_into(result, data)
    return result


def _merge_into(target: dict[str, Any], data: Mapping[str, Any]) -> None:
    for key, value in data.items():
        key = _check_key(key)
        if isinstance(value, Mapping):
            existing = target.get(key)
            if not isinstance(existing, dict):
                existing = target[key] = {}
            _merge_into(existing, value)
        else:
            assign_value(target, key, value)


def parse_update_args(field_or_data: Any, more_fields_and_values: Sequence[Any]) -> list[FieldUpdate]:
    """Normalise the arguments of ``update`` into (field path, value) pairs.

    Accepts a mapping of field paths to values (dotted keys address nested
    fields), or alternating field path and value arguments.
    """
    if isinstance(field_or_data, Mapping):
        if more_fields_and_values:
            msg = "update() takes either a mapping or field/value pairs, not both"
            raise InvalidFieldPathError(msg, field_path=more_fields_and_values)
        return [(_as_update_path(key), value) for key, value in field_or_data.items()]

    args = [field_or_data, *more_fields_and_values]
    if len(args) % 2:
        msg = "update() needs an even number of field path and value arguments"
        raise InvalidFieldPathError(msg, field_path=args[-1])
    return [(_as_update_path(args[i]), args[i + 1]) for i in range(0, len(args), 2)]


def _as_update_path(value: Any) -> FieldPathSpec:
    match value:
        case str():
            return DottedPath(value)
        case FieldPath() | DottedPath():
            return value
    msg = f"Unsupported field path: typeof({type(value).__name__}: {value!r})"
    raise InvalidFieldPathError(msg, field_path=value)
