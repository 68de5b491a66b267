"""Tests for the in-memory document store."""

import pytest

from mockstore.core.config import Settings
from mockstore.core.exceptions import DocumentNotFoundError, InvalidPathError
from mockstore.models.snapshots import ChangeType
from mockstore.storage.memory import AUTO_ID_LENGTH, CollectionReference, DocumentReference, MockStore
from mockstore.transaction.log import TransactionState


class TestReferences:
    """Test path handling and reference caching."""

    @pytest.mark.parametrize("path", ["", "cities", "cities/SF/landmarks", "cities//SF"])
    def test_invalid_document_paths(self, store, path):
        """Test that document paths need an even number of segments."""
        with pytest.raises(InvalidPathError):
            store.doc(path)

    @pytest.mark.parametrize("path", ["", "cities/SF", "/"])
    def test_invalid_collection_paths(self, store, path):
        """Test that collection paths need an odd number of segments."""
        with pytest.raises(InvalidPathError):
            store.collection(path)

    def test_references_are_cached_per_path(self, store):
        """Test that every route to a path yields the same reference."""
        ref = store.doc("cities/SF")

        assert store.collection("cities").document("SF") is ref
        assert store.doc("/cities/SF/") is ref
        assert ref.parent is store.collection("cities")

    def test_sub_collections(self, store):
        """Test nesting of collections under documents."""
        landmarks = store.doc("cities/SF").collection("landmarks")

        assert isinstance(landmarks, CollectionReference)
        assert landmarks.path == "cities/SF/landmarks"
        assert landmarks.id == "landmarks"
        assert landmarks.parent is store.doc("cities/SF")
        assert store.collection("cities").parent is None

    def test_auto_ids(self, store):
        """Test generated document ids."""
        cities = store.collection("cities")
        first, second = cities.document(), cities.document()

        assert isinstance(first, DocumentReference)
        assert len(first.id) == AUTO_ID_LENGTH
        assert first.id != second.id
        assert not first.exists


class TestDocumentWrites:
    """Test direct document reads and writes."""

    @pytest.mark.asyncio
    async def test_set_get_update_delete(self, store):
        """Test the full lifecycle of one document."""
        ref = store.doc("people/ada")

        await ref.set({"name": "Ada", "langs": ["en"]})
        await ref.update({"langs": ["en", "fr"]})
        snapshot = await ref.get()
        await ref.delete()

        assert snapshot.exists
        assert snapshot.to_dict() == {"name": "Ada", "langs": ["en", "fr"]}
        assert not ref.exists
        assert not (await ref.get()).exists

    @pytest.mark.asyncio
    async def test_snapshots_are_isolated_from_storage(self, store):
        """Test that snapshots copy data in both directions."""
        ref = store.doc("people/ada")
        payload = {"tags": ["a"]}
        await ref.set(payload)
        snapshot = await ref.get()

        payload["tags"].append("b")
        snapshot.to_dict()["tags"].append("c")

        assert ref.data == {"tags": ["a"]}
        assert snapshot.get("tags") == ["a"]

    @pytest.mark.asyncio
    async def test_set_with_merge(self, store):
        """Test merging into a stored document."""
        ref = store.doc("people/ada")
        await ref.set({"name": "Ada", "age": 36})

        await ref.set({"age": 37}, merge=True)

        assert ref.data == {"name": "Ada", "age": 37}

    @pytest.mark.asyncio
    async def test_update_missing_document_fails(self, store):
        """Test that update needs an existing document."""
        with pytest.raises(DocumentNotFoundError):
            await store.doc("people/nobody").update({"age": 1})

    @pytest.mark.asyncio
    async def test_add_creates_document(self, store):
        """Test adding a document with a generated id."""
        ref = await store.collection("people").add({"name": "Grace"})

        assert ref.data == {"name": "Grace"}
        assert store.collection("people").document_refs() == [ref]


class TestListeners:
    """Test document and collection snapshot listeners."""

    @pytest.mark.asyncio
    async def test_document_listener(self, store):
        """Test that a document listener sees each committed write."""
        ref = store.doc("people/ada")
        seen = []
        handle = ref.on_snapshot(lambda snapshot: seen.append(snapshot.to_dict()))

        await ref.set({"age": 36})
        await ref.delete()
        handle()
        await ref.set({"age": 1})

        assert seen == [{"age": 36}, None]

    @pytest.mark.asyncio
    async def test_collection_listener_receives_whole_collection(self, store, cities):
        """Test the raw collection change stream."""
        batches = []
        cities.on_snapshot(batches.append)

        await cities.document("SD").set({"name": "San Diego"})

        (batch,) = batches
        assert [doc.id for doc in batch.docs] == ["SF", "LA", "DC", "TOK", "BJ", "SD"]
        (change,) = batch.changes
        assert (change.type, change.old_index, change.new_index) == (ChangeType.ADDED, -1, 5)

    @pytest.mark.asyncio
    async def test_failing_document_listener_is_isolated(self, store):
        """Test that a broken listener does not fail the write."""
        ref = store.doc("people/ada")

        def failing(snapshot):
            raise RuntimeError("listener broke")

        ref.on_snapshot(failing)
        await ref.set({"age": 36})

        assert ref.data == {"age": 36}

    @pytest.mark.asyncio
    async def test_batch_tail_event_fires_collection(self, store, cities):
        """Test the single-change collection batch of a tail event."""
        batches = []
        cities.on_snapshot(batches.append)

        cities.document("SF").fire_document_change_event(ChangeType.MODIFIED, 0, True)

        (batch,) = batches
        (change,) = batch.changes
        assert (change.type, change.document.id, change.new_index) == (ChangeType.MODIFIED, "SF", 0)


class TestStoreOperations:
    """Test run_transaction and reset."""

    @pytest.mark.asyncio
    async def test_run_transaction_with_coroutine(self, store, cities):
        """Test a read-then-write transaction function."""

        async def bump(transaction):
            snapshot = await transaction.get(cities.document("SF"))
            transaction.update(cities.document("SF"), "population", snapshot.get("population") + 1)
            return "bumped"

        assert await store.run_transaction(bump) == "bumped"
        assert cities.document("SF").data["population"] == 860001

    @pytest.mark.asyncio
    async def test_run_transaction_with_plain_function(self, store, cities):
        """Test a synchronous transaction function."""
        result = await store.run_transaction(lambda transaction: transaction.delete(cities.document("LA")))

        assert result.state is TransactionState.COMMITTED
        assert not cities.document("LA").exists

    @pytest.mark.asyncio
    async def test_run_transaction_failure_rolls_back(self, store, cities):
        """Test that an error in the function discards its writes."""
        started = []

        def failing(transaction):
            started.append(transaction)
            transaction.delete(cities.document("SF"))
            raise ValueError("abort")

        with pytest.raises(ValueError, match="abort"):
            await store.run_transaction(failing)

        assert started[0].state is TransactionState.ROLLED_BACK
        assert cities.document("SF").exists

    @pytest.mark.asyncio
    async def test_reset_drops_data_but_keeps_listeners(self, store, cities):
        """Test resetting the store between tests."""
        batches = []
        cities.on_snapshot(batches.append)

        store.reset()
        await cities.document("SF").set({"name": "again"})

        assert [ref.id for ref in cities.document_refs()] == ["SF"]
        assert not store.doc("cities/LA").exists
        assert len(batches) == 1
        assert batches[0].changes[0].type is ChangeType.ADDED

    def test_store_uses_given_settings(self):
        """Test that explicit settings reach the listener registries."""
        store = MockStore(Settings(isolate_listener_errors=False))

        assert store.settings.isolate_listener_errors is False
        assert store.doc("people/ada")._listeners.isolate_errors is False
