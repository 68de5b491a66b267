"""Tests for sentinel field values."""

from datetime import datetime

import pytest

from mockstore.field_values import FieldValue, Sentinel, SentinelKind, resolve_sentinel


class TestFieldValueFactory:
    """Test construction of sentinel values."""

    def test_factories_build_tagged_sentinels(self):
        """Test that each factory produces the matching kind."""
        assert FieldValue.delete() == Sentinel(SentinelKind.DELETE)
        assert FieldValue.increment(2) == Sentinel(SentinelKind.INCREMENT, (2,))
        assert FieldValue.array_union(1, 2).args == (1, 2)

    @pytest.mark.parametrize("amount", ["1", None, True])
    def test_increment_requires_a_number(self, amount):
        """Test that increment rejects non-numeric amounts."""
        with pytest.raises(TypeError):
            FieldValue.increment(amount)


class TestResolveSentinel:
    """Test applying sentinels to their target field."""

    def test_delete_removes_field(self):
        """Test that delete drops the key and ignores absent keys."""
        parent = {"a": 1, "b": 2}
        resolve_sentinel(parent, "a", FieldValue.delete())
        resolve_sentinel(parent, "missing", FieldValue.delete())
        assert parent == {"b": 2}

    def test_server_timestamp_stores_aware_datetime(self):
        """Test that server timestamps are timezone aware."""
        parent: dict = {}
        resolve_sentinel(parent, "at", FieldValue.server_timestamp())
        assert isinstance(parent["at"], datetime)
        assert parent["at"].tzinfo is not None

    def test_increment_adds_or_initialises(self):
        """Test increment on numbers, missing fields and non-numbers."""
        parent = {"count": 2, "label": "x"}
        resolve_sentinel(parent, "count", FieldValue.increment(3))
        resolve_sentinel(parent, "fresh", FieldValue.increment(1.5))
        resolve_sentinel(parent, "label", FieldValue.increment(4))
        assert parent == {"count": 5, "fresh": 1.5, "label": 4}

    def test_array_union_appends_only_new_elements(self):
        """Test that array union skips elements already present."""
        parent = {"tags": ["a", "b"]}
        resolve_sentinel(parent, "tags", FieldValue.array_union("b", "c"))
        resolve_sentinel(parent, "other", FieldValue.array_union("x"))
        assert parent == {"tags": ["a", "b", "c"], "other": ["x"]}

    def test_array_remove_drops_every_match(self):
        """Test that array remove deletes all equal elements."""
        parent = {"tags": ["a", "b", "a", "c"]}
        resolve_sentinel(parent, "tags", FieldValue.array_remove("a", "c"))
        assert parent == {"tags": ["b"]}
