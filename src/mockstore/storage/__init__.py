"""In-memory storage adapters."""

from mockstore.storage.memory import CollectionReference, DocumentReference, MockStore

__all__ = ["CollectionReference", "DocumentReference", "MockStore"]
