from unittest.mock import patch

import pytest

from infrastructure.exceptions import DocumentNotFoundError, DocumentValidationError
from infrastructure.persistence import (
    InMemoryDocumentStore,
    OrderBy,
    QueryFilter,
    SortDirection,
)
from infrastructure.resilience import RetryPolicy


@pytest.fixture
def store():
    return InMemoryDocumentStore(retry_policy=RetryPolicy(base_delay_ms=0))


@pytest.mark.unit
class TestValidation:
    async def test_create_requires_collection(self, store):
        with pytest.raises(DocumentValidationError):
            await store.create("", {"name": "x"})

    async def test_create_requires_dict_data(self, store):
        with pytest.raises(DocumentValidationError):
            await store.create("users", ["not", "a", "dict"])

    async def test_read_requires_doc_id(self, store):
        with pytest.raises(DocumentValidationError):
            await store.read("users", "  ")

    async def test_unknown_operator_is_rejected(self, store):
        with pytest.raises(DocumentValidationError):
            await store.query("users", [QueryFilter("role", "~=", "nurse")])

    async def test_in_operator_requires_collection_value(self, store):
        with pytest.raises(DocumentValidationError):
            await store.query("users", [QueryFilter("role", "in", "nurse")])

    async def test_non_positive_limit_is_rejected(self, store):
        with pytest.raises(DocumentValidationError):
            await store.query("users", limit=0)

    async def test_validation_errors_are_not_retried(self, store):
        with patch.object(store, "_read") as mock_read:
            with pytest.raises(DocumentValidationError):
                await store.read("", "id")
        mock_read.assert_not_called()

    async def test_validation_error_is_a_value_error(self, store):
        with pytest.raises(ValueError):
            await store.read("users", "")


@pytest.mark.unit
class TestCrud:
    async def test_create_and_read(self, store):
        doc_id = await store.create("users", {"name": "Jane"})
        document = await store.read("users", doc_id)
        assert document["id"] == doc_id
        assert document["name"] == "Jane"
        assert "createdAt" in document
        assert "updatedAt" in document

    async def test_create_with_explicit_id(self, store):
        assert await store.create("users", {"name": "Jane"}, doc_id="N7") == "N7"
        assert (await store.read("users", "N7"))["name"] == "Jane"

    async def test_caller_created_at_is_kept(self, store):
        await store.create("users", {"createdAt": "yesterday"}, doc_id="u1")
        assert (await store.read("users", "u1"))["createdAt"] == "yesterday"

    async def test_read_missing_returns_none(self, store):
        assert await store.read("users", "nobody") is None

    async def test_reads_are_copies(self, store):
        await store.create("users", {"tags": ["a"]}, doc_id="u1")
        document = await store.read("users", "u1")
        document["tags"].append("b")
        assert (await store.read("users", "u1"))["tags"] == ["a"]

    async def test_update_merges_fields(self, store):
        await store.create("users", {"name": "Jane", "role": "nurse"}, doc_id="u1")
        await store.update("users", "u1", {"role": "doctor"})
        document = await store.read("users", "u1")
        assert document["name"] == "Jane"
        assert document["role"] == "doctor"

    async def test_update_missing_raises_after_retries(self, store):
        with pytest.raises(DocumentNotFoundError):
            await store.update("users", "nobody", {"role": "nurse"})

    async def test_delete(self, store):
        await store.create("users", {"name": "Jane"}, doc_id="u1")
        await store.delete("users", "u1")
        assert await store.read("users", "u1") is None

    async def test_delete_missing_is_silent(self, store):
        await store.delete("users", "nobody")


@pytest.mark.unit
class TestQuery:
    @pytest.fixture
    def seeded(self):
        return InMemoryDocumentStore(
            retry_policy=RetryPolicy(base_delay_ms=0),
            seed={
                "users": {
                    "u1": {"name": "Ann", "role": "nurse", "age": 40, "tags": ["a"]},
                    "u2": {"name": "Bob", "role": "doctor", "age": 30},
                    "u3": {"name": "Cid", "role": "buddy", "age": 50, "tags": ["b"]},
                    "u4": {"name": "Dee", "role": "nurse"},
                }
            },
        )

    async def test_unfiltered_query_keeps_insertion_order(self, seeded):
        documents = await seeded.query("users")
        assert [d["id"] for d in documents] == ["u1", "u2", "u3", "u4"]

    async def test_equality_filter(self, seeded):
        documents = await seeded.query("users", [QueryFilter("role", "==", "nurse")])
        assert [d["id"] for d in documents] == ["u1", "u4"]

    async def test_in_filter(self, seeded):
        documents = await seeded.query(
            "users", [QueryFilter("role", "in", ["doctor", "buddy"])]
        )
        assert [d["id"] for d in documents] == ["u2", "u3"]

    async def test_array_contains(self, seeded):
        documents = await seeded.query(
            "users", [QueryFilter("tags", "array-contains", "b")]
        )
        assert [d["id"] for d in documents] == ["u3"]

    async def test_filters_are_combined(self, seeded):
        documents = await seeded.query(
            "users",
            [QueryFilter("role", "==", "nurse"), QueryFilter("age", ">=", 40)],
        )
        assert [d["id"] for d in documents] == ["u1"]

    async def test_missing_field_never_matches(self, seeded):
        documents = await seeded.query("users", [QueryFilter("age", "<", 100)])
        assert "u4" not in [d["id"] for d in documents]

    async def test_order_by_descending_with_limit(self, seeded):
        documents = await seeded.query(
            "users", order_by=OrderBy("age", SortDirection.DESCENDING), limit=2
        )
        assert [d["id"] for d in documents] == ["u3", "u1"]

    async def test_order_by_excludes_documents_without_field(self, seeded):
        documents = await seeded.query("users", order_by=OrderBy("age"))
        assert [d["id"] for d in documents] == ["u2", "u1", "u3"]

    async def test_unknown_collection_is_empty(self, seeded):
        assert await seeded.query("nothing") == []


@pytest.mark.unit
class TestSubscriptions:
    async def test_subscriber_gets_initial_snapshot_and_changes(self, store):
        snapshots = []
        store.subscribe(
            "notifications",
            snapshots.append,
            [QueryFilter("recipientId", "==", "n1")],
        )
        await store.create("notifications", {"recipientId": "n1"}, doc_id="a")
        await store.create("notifications", {"recipientId": "n2"}, doc_id="b")

        assert [len(snapshot) for snapshot in snapshots] == [0, 1, 1]
        assert snapshots[-1][0]["id"] == "a"

    async def test_unsubscribe_stops_delivery(self, store):
        snapshots = []
        unsubscribe = store.subscribe("notifications", snapshots.append)
        unsubscribe()
        await store.create("notifications", {"recipientId": "n1"})
        assert len(snapshots) == 1

    async def test_failing_callback_does_not_break_writes(self, store):
        def broken(_snapshot):
            raise RuntimeError("boom")

        store.subscribe("notifications", broken)
        doc_id = await store.create("notifications", {"recipientId": "n1"})
        assert await store.read("notifications", doc_id) is not None

    def test_callback_must_be_callable(self, store):
        with pytest.raises(DocumentValidationError):
            store.subscribe("notifications", "not callable")
