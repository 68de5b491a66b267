"""Shared test fixtures for the mockstore test suite.

Documents are seeded straight into storage, without notifying anyone, so each
test starts from a known collection state and only observes its own writes.
"""

from collections.abc import Callable, Mapping
import os
from typing import Any

import pytest

from mockstore.core.config import RollbackPolicy, Settings
from mockstore.storage.memory import CollectionReference, MockStore

# Set testing environment
os.environ["ENVIRONMENT"] = "testing"


@pytest.fixture
def settings() -> Settings:
    """Settings for a test run with default listener and rollback behaviour."""
    return Settings(environment="testing", rollback_policy=RollbackPolicy.NOOP)


@pytest.fixture
def store(settings: Settings) -> MockStore:
    """Fresh, empty document store."""
    return MockStore(settings)


@pytest.fixture
def seed(store: MockStore) -> Callable[[str, Mapping[str, dict[str, Any]]], CollectionReference]:
    """Write documents into a collection without firing any listener."""

    def _seed(path: str, documents: Mapping[str, dict[str, Any]]) -> CollectionReference:
        collection = store.collection(path)
        for document_id, data in documents.items():
            collection.document(document_id).restore_data(data)
        return collection

    return _seed


@pytest.fixture
def cities(seed: Callable[..., CollectionReference]) -> CollectionReference:
    """Five city documents, in insertion order SF, LA, DC, TOK, BJ."""
    return seed(
        "cities",
        {
            "SF": {
                "name": "San Francisco",
                "state": "CA",
                "country": "USA",
                "capital": False,
                "population": 860000,
                "regions": ["west_coast", "norcal"],
            },
            "LA": {
                "name": "Los Angeles",
                "state": "CA",
                "country": "USA",
                "capital": False,
                "population": 3900000,
                "regions": ["west_coast", "socal"],
            },
            "DC": {
                "name": "Washington, D.C.",
                "state": None,
                "country": "USA",
                "capital": True,
                "population": 680000,
                "regions": ["east_coast"],
            },
            "TOK": {
                "name": "Tokyo",
                "state": None,
                "country": "Japan",
                "capital": True,
                "population": 9000000,
                "regions": ["kanto", "honshu"],
            },
            "BJ": {
                "name": "Beijing",
                "state": None,
                "country": "China",
                "capital": True,
                "population": 21500000,
                "regions": ["jingjinji", "hebei"],
            },
        },
    )


@pytest.fixture
def numbers(seed: Callable[..., CollectionReference]) -> CollectionReference:
    """Ten documents n0..n9 holding {"n": i}, inserted out of order."""
    return seed("numbers", {f"n{i}": {"n": i} for i in (3, 7, 0, 9, 1, 5, 2, 8, 4, 6)})
