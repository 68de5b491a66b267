"""Field paths addressing values inside nested documents.

A field path arrives either as a dotted string (``"address.city"``) or as a
structured ``FieldPath("address", "city")``. Both are normalised into one of
two tagged variants, ``DottedPath`` and ``FieldPath``, and every consumer
resolves them with a ``match`` on the variant.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from mockstore.core.exceptions import InvalidFieldPathError
from mockstore.values import MISSING


@dataclass(frozen=True)
class DottedPath:
    """A field path written as one dotted string."""

    text: str


class FieldPath:
    """A field path given as explicit segment names.

    Segments may contain dots, which a dotted string cannot express.
    """

    __slots__ = ("segments",)
    __match_args__ = ("segments",)

    def __init__(self, *field_names: str) -> None:
        if not field_names:
            msg = "FieldPath needs at least one field name"
            raise InvalidFieldPathError(msg, field_path=field_names)
        for name in field_names:
            if not isinstance(name, str) or not name:
                msg = f"Invalid field name in FieldPath: {name!r}"
                raise InvalidFieldPathError(msg, field_path=field_names)
        self.segments: tuple[str, ...] = tuple(field_names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldPath):
            return NotImplemented
        return self.segments == other.segments

    def __hash__(self) -> int:
        return hash(self.segments)

    def __repr__(self) -> str:
        return f"FieldPath{self.segments!r}"

    def __str__(self) -> str:
        return ".".join(self.segments)


FieldPathSpec = DottedPath | FieldPath


def to_field_path(value: Any) -> FieldPathSpec:
    """Convert a caller supplied field path into its tagged variant."""
    if isinstance(value, (DottedPath, FieldPath)):
        return value
    if isinstance(value, str):
        return DottedPath(value)
    msg = f"Unsupported field path: {type(value).__name__}: {value!r}"
    raise InvalidFieldPathError(msg, field_path=value)


def field_segments(path: FieldPathSpec) -> tuple[str, ...]:
    """Split a field path into its segment names."""
    match path:
        case DottedPath(text=text):
            segments = tuple(text.split("."))
            if not text or any(not segment for segment in segments):
                msg = f"Invalid field path: {text!r}"
                raise InvalidFieldPathError(msg, field_path=text)
            return segments
        case FieldPath(segments=segments):
            return segments
    msg = f"Unsupported field path: {path!r}"
    raise InvalidFieldPathError(msg, field_path=path)


def get_field(data: Mapping[str, Any] | None, path: Any) -> Any:
    """Read the value at a field path, or MISSING when it is not there."""
    current: Any = data
    for segment in field_segments(to_field_path(path)):
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current
