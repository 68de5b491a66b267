"""Where-rule evaluation.

A document passes a query's filter when every where rule holds for it. A
field that is missing from the document never satisfies a predicate.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from enum import StrEnum
import logging
from typing import Any, Protocol, TypeVar

from mockstore.core.exceptions import QueryValidationError, UnsupportedOperatorError
from mockstore.field_path import get_field
from mockstore.models.rules import WhereRule
from mockstore.values import MISSING, compare_values, same_kind, values_equal

logger = logging.getLogger(__name__)


class HasData(Protocol):
    @property
    def data(self) -> Mapping[str, Any] | None: ...


D = TypeVar("D", bound=HasData)


class WhereOperator(StrEnum):
    """Operators accepted by ``Query.where``."""

    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    EQUAL = "=="
    NOT_EQUAL = "!="
    GREATER_THAN_OR_EQUAL = ">="
    GREATER_THAN = ">"
    ARRAY_CONTAINS = "array-contains"
    ARRAY_CONTAINS_ANY = "array-contains-any"
    IN = "in"
    NOT_IN = "not-in"


def _is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _require_array(op: WhereOperator, value: Any) -> Sequence[Any]:
    if not _is_array(value):
        msg = f"'{op}' filters need a list of values, got {type(value).__name__}"
        raise QueryValidationError(msg, details={"op": str(op)})
    return value


def _ordered(predicate: Callable[[int], bool]) -> Callable[[Any, Any], bool]:
    def compare(field_value: Any, value: Any) -> bool:
        return same_kind(field_value, value) and predicate(compare_values(field_value, value))

    return compare


def _array_contains(field_value: Any, value: Any) -> bool:
    return _is_array(field_value) and any(values_equal(item, value) for item in field_value)


def _array_contains_any(field_value: Any, values: Any) -> bool:
    values = _require_array(WhereOperator.ARRAY_CONTAINS_ANY, values)
    return _is_array(field_value) and any(
        values_equal(item, candidate) for item in field_value for candidate in values
    )


def _in(field_value: Any, values: Any) -> bool:
    values = _require_array(WhereOperator.IN, values)
    return any(values_equal(field_value, candidate) for candidate in values)


def _not_in(field_value: Any, values: Any) -> bool:
    values = _require_array(WhereOperator.NOT_IN, values)
    return field_value is not None and not any(
        values_equal(field_value, candidate) for candidate in values
    )


def _not_equal(field_value: Any, value: Any) -> bool:
    return field_value is not None and not values_equal(field_value, value)


_PREDICATES: dict[WhereOperator, Callable[[Any, Any], bool]] = {
    WhereOperator.LESS_THAN: _ordered(lambda result: result < 0),
    WhereOperator.LESS_THAN_OR_EQUAL: _ordered(lambda result: result <= 0),
    WhereOperator.EQUAL: values_equal,
    WhereOperator.NOT_EQUAL: _not_equal,
    WhereOperator.GREATER_THAN_OR_EQUAL: _ordered(lambda result: result >= 0),
    WhereOperator.GREATER_THAN: _ordered(lambda result: result > 0),
    WhereOperator.ARRAY_CONTAINS: _array_contains,
    WhereOperator.ARRAY_CONTAINS_ANY: _array_contains_any,
    WhereOperator.IN: _in,
    WhereOperator.NOT_IN: _not_in,
}


def parse_operator(op: Any) -> WhereOperator:
    """Map an operator string onto the supported operators."""
    try:
        return WhereOperator(op)
    except ValueError:
        raise UnsupportedOperatorError(op) from None


def matches_rule(data: Mapping[str, Any] | None, rule: WhereRule) -> bool:
    """Check a single where rule against document data."""
    predicate = _PREDICATES[parse_operator(rule.op)]
    field_value = get_field(data, rule.field_path)
    if field_value is MISSING:
        return False
    return predicate(field_value, rule.value)


def matches_rules(data: Mapping[str, Any] | None, rules: Iterable[WhereRule]) -> bool:
    """Check that every where rule holds for document data."""
    return all(matches_rule(data, rule) for rule in rules)


def filter_documents(documents: Sequence[D], rules: Sequence[WhereRule]) -> list[D]:
    """Keep the documents that satisfy every rule, preserving input order."""
    if not rules:
        return list(documents)
    # Validate operators up front so an empty input still reports them.
    for rule in rules:
        parse_operator(rule.op)
    result = [doc for doc in documents if matches_rules(doc.data, rules)]
    logger.debug("Filtered %d of %d documents with %d rule(s)", len(result), len(documents), len(rules))
    return result
