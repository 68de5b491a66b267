"""Query evaluation pipeline.

Filter, sort, start-trim, end-trim and limit always run in this order:
cursors are defined against the filtered and ordered sequence, and the limit
is applied last so pagination composes with filtering and ordering.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import TypeVar

from mockstore.core.exceptions import CursorOrderMismatchError, CursorWithoutOrderError
from mockstore.models.rules import EndMode, EndRule, QueryRules, StartMode, StartRule
from mockstore.models.snapshots import NOT_FOUND
from mockstore.query.cursors import cursor_values, locate
from mockstore.query.filtering import HasData, filter_documents
from mockstore.query.sorting import sort_documents

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=HasData)


def _cursor_index(documents: Sequence[D], rules: QueryRules, cursor: StartRule | EndRule) -> int:
    if not rules.order:
        raise CursorWithoutOrderError(cursor.method_name)
    values = cursor_values(cursor.field_values, rules.order)
    if len(values) != len(rules.order):
        raise CursorOrderMismatchError(cursor.method_name, len(values), len(rules.order))
    return locate(documents, [rule.field_path for rule in rules.order], values)


def evaluate(documents: Sequence[D], rules: QueryRules) -> list[D]:
    """Run the full query pipeline over candidate documents."""
    result = filter_documents(documents, rules.where)
    result = sort_documents(result, rules.order)

    if rules.start is not None:
        index = _cursor_index(result, rules, rules.start)
        if index != NOT_FOUND:
            result = result[index if rules.start.mode is StartMode.AT else index + 1 :]

    if rules.end is not None:
        index = _cursor_index(result, rules, rules.end)
        if index != NOT_FOUND:
            result = result[: index + 1 if rules.end.mode is EndMode.AT else index]

    if rules.limit is not None:
        result = result[: rules.limit]

    logger.debug("Query evaluated to %d of %d documents", len(result), len(documents))
    return result
