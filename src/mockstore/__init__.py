"""mockstore - in-memory document store emulator.

Emulates the query, snapshot listener and transaction behaviour of a hosted
document database so that application code can be unit tested without a
network connection.
"""

from mockstore.core.config import RollbackPolicy, Settings, get_settings
from mockstore.core.exceptions import (
    InvariantViolationError,
    MockStoreBaseError,
    MockStoreValidationError,
    NotImplementedYetError,
)
from mockstore.core.logging_config import setup_logging
from mockstore.field_path import FieldPath
from mockstore.field_values import FieldValue
from mockstore.models.snapshots import (
    ChangeType,
    DocumentChange,
    DocumentSnapshot,
    QuerySnapshot,
)
from mockstore.query.query import Query
from mockstore.storage.memory import CollectionReference, DocumentReference, MockStore
from mockstore.transaction.transaction import Transaction

__version__ = "0.1.0"

__all__ = [
    "ChangeType",
    "CollectionReference",
    "DocumentChange",
    "DocumentReference",
    "DocumentSnapshot",
    "FieldPath",
    "FieldValue",
    "InvariantViolationError",
    "MockStore",
    "MockStoreBaseError",
    "MockStoreValidationError",
    "NotImplementedYetError",
    "Query",
    "QuerySnapshot",
    "RollbackPolicy",
    "Settings",
    "Transaction",
    "get_settings",
    "setup_logging",
]
