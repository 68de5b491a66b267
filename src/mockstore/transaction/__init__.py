"""Transactions: buffered writes, field mutation and commit."""

from mockstore.transaction.commit import CommitCoordinator
from mockstore.transaction.log import TransactionLog, TransactionState
from mockstore.transaction.transaction import Transaction

__all__ = [
    "CommitCoordinator",
    "Transaction",
    "TransactionLog",
    "TransactionState",
]
