"""Ports layer - storage contracts the engines depend on.

The engines depend on these abstractions, and the in-memory adapters in
``mockstore.storage`` implement them.
"""

from .storage import CollectionPort, DocumentPort, StorePort

__all__ = [
    "CollectionPort",
    "DocumentPort",
    "StorePort",
]
