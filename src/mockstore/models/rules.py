"""Query rule models.

A ``QueryRules`` value holds everything a query has accumulated: filters,
ordering, cursors and the limit. It is frozen; every refinement produces a
new value that shares the untouched parts of the previous one.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mockstore.core.exceptions import QueryValidationError
from mockstore.field_path import DottedPath, FieldPath


class Direction(StrEnum):
    """Sort direction of an order rule."""

    ASCENDING = "asc"
    DESCENDING = "desc"

    @classmethod
    def parse(cls, value: Any) -> Direction:
        """Accept enum members and the usual spellings of both directions."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {"asc", "ascending"}:
                return cls.ASCENDING
            if normalized in {"desc", "descending"}:
                return cls.DESCENDING
        msg = f"Invalid order direction: {value!r}"
        raise QueryValidationError(msg, details={"direction": repr(value)})


class StartMode(StrEnum):
    """Whether a start cursor includes the matching document."""

    AT = "at"
    AFTER = "after"


class EndMode(StrEnum):
    """Whether an end cursor includes the matching document."""

    AT = "at"
    BEFORE = "before"


class _FrozenRule(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class WhereRule(_FrozenRule):
    """One filter predicate; the operator is checked when the query runs."""

    field_path: DottedPath | FieldPath
    op: Any
    value: Any = None


class OrderRule(_FrozenRule):
    """One sort key, applied left to right."""

    field_path: DottedPath | FieldPath
    direction: Direction = Direction.ASCENDING


class StartRule(_FrozenRule):
    """Cursor marking the first document of the result."""

    field_values: tuple[Any, ...]
    mode: StartMode = StartMode.AT

    @property
    def method_name(self) -> str:
        return "start_at" if self.mode is StartMode.AT else "start_after"


class EndRule(_FrozenRule):
    """Cursor marking the last document of the result."""

    field_values: tuple[Any, ...]
    mode: EndMode = EndMode.AT

    @property
    def method_name(self) -> str:
        return "end_at" if self.mode is EndMode.AT else "end_before"


class QueryRules(_FrozenRule):
    """All rules accumulated by a query."""

    where: tuple[WhereRule, ...] = Field(default_factory=tuple)
    order: tuple[OrderRule, ...] = Field(default_factory=tuple)
    start: StartRule | None = None
    end: EndRule | None = None
    limit: int | None = None

    def with_where(self, rule: WhereRule) -> QueryRules:
        return self.model_copy(update={"where": (*self.where, rule)})

    def with_order(self, rule: OrderRule) -> QueryRules:
        return self.model_copy(update={"order": (*self.order, rule)})

    def with_start(self, rule: StartRule) -> QueryRules:
        return self.model_copy(update={"start": rule})

    def with_end(self, rule: EndRule) -> QueryRules:
        return self.model_copy(update={"end": rule})

    def with_limit(self, limit: int) -> QueryRules:
        return self.model_copy(update={"limit": limit})
