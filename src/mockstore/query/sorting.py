"""Multi-key document ordering.

Order rules are compared left to right and the first non-equal comparison
decides. Documents that tie on every key keep their input order, which
cursor pagination relies on.
"""

from __future__ import annotations

from collections.abc import Sequence
import functools
import logging
from typing import Any, TypeVar

from mockstore.field_path import get_field
from mockstore.models.rules import Direction, OrderRule
from mockstore.query.filtering import HasData
from mockstore.values import compare_values

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=HasData)


def compare_documents(left: HasData, right: HasData, rules: Sequence[OrderRule]) -> int:
    """Three-way comparison of two documents under the given order rules."""
    for rule in rules:
        result = compare_values(
            get_field(left.data, rule.field_path),
            get_field(right.data, rule.field_path),
        )
        if result:
            return -result if rule.direction is Direction.DESCENDING else result
    return 0


def sort_documents(documents: Sequence[D], rules: Sequence[OrderRule]) -> list[D]:
    """Return the documents stably sorted by the order rules."""
    if not rules:
        return list(documents)
    key: Any = functools.cmp_to_key(
        lambda left, right: compare_documents(left, right, rules)
    )
    result = sorted(documents, key=key)
    logger.debug("Sorted %d documents by %d rule(s)", len(result), len(rules))
    return result
