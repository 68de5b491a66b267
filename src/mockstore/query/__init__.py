"""Query engine: filtering, ordering, cursors, limits and change scoping."""

from mockstore.query.diff import diff_changes
from mockstore.query.evaluator import evaluate
from mockstore.query.filtering import WhereOperator, filter_documents
from mockstore.query.query import Query
from mockstore.query.sorting import sort_documents

__all__ = [
    "Query",
    "WhereOperator",
    "diff_changes",
    "evaluate",
    "filter_documents",
    "sort_documents",
]
