"""Value models shared by the query and transaction engines."""

from mockstore.models.rules import (
    Direction,
    EndMode,
    EndRule,
    OrderRule,
    QueryRules,
    StartMode,
    StartRule,
    WhereRule,
)
from mockstore.models.snapshots import (
    NOT_FOUND,
    ChangeType,
    DocumentChange,
    DocumentSnapshot,
    QuerySnapshot,
)

__all__ = [
    "NOT_FOUND",
    "ChangeType",
    "Direction",
    "DocumentChange",
    "DocumentSnapshot",
    "EndMode",
    "EndRule",
    "OrderRule",
    "QuerySnapshot",
    "QueryRules",
    "StartMode",
    "StartRule",
    "WhereRule",
]
