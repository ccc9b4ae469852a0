"""
Tests for the storage collaborators.

The MongoDB backend is exercised with MagicMock standing in for pymongo,
so no server is needed.
"""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from bson.errors import InvalidDocument
from pymongo.errors import (
    ConfigurationError,
    OperationFailure,
    ServerSelectionTimeoutError,
    WriteError,
)

from arraybench.config import HarnessConfig
from arraybench.documents import TestDocument, synthesize
from arraybench.errors import (
    ConfigError,
    ErrorCode,
    SerializationError,
    StorageConnectionError,
    StorageReadError,
    StorageWriteError,
)
from arraybench.storage import get_store
from arraybench.storage.memory import MemoryStore
from arraybench.storage.mongo import MongoCollection, MongoStore


class TestMemoryStore:
    """In-memory backend behaviour."""

    def test_insert_assigns_id(self, memory_store):
        coll = memory_store.collection("c")
        inserted_id = coll.insert({"a": 1})
        assert isinstance(inserted_id, ObjectId)
        assert coll.count() == 1

    def test_insert_keeps_given_id(self, memory_store):
        coll = memory_store.collection("c")
        assert coll.insert({"_id": 5, "a": 1}) == 5

    def test_duplicate_id_rejected(self, memory_store):
        coll = memory_store.collection("c")
        coll.insert({"_id": 5})
        with pytest.raises(StorageWriteError) as exc_info:
            coll.insert({"_id": 5})
        assert exc_info.value.context["operation"] == "insert"

    def test_round_trip_equals_inserted(self, memory_store, rng, id_factory):
        """Read-back by id equals the inserted document apart from _id."""
        coll = memory_store.collection("c")
        doc = synthesize(8, rng, id_factory)
        doc.size_in_bytes = 1234
        doc.insertion_time = "2025-01-02 03:04:05"

        doc.id = coll.insert(doc.to_document())
        found = coll.find_one({"_id": doc.id})

        assert TestDocument.from_document(found) == doc

    def test_find_filters_on_equality(self, memory_store):
        coll = memory_store.collection("c")
        coll.insert({"k": 1})
        coll.insert({"k": 2})
        coll.insert({"k": 1})
        assert len(coll.find({"k": 1})) == 2
        assert len(coll.find({})) == 3
        assert len(coll.find()) == 3
        assert coll.find_one({"k": 3}) is None

    def test_find_filters_on_in(self, memory_store):
        coll = memory_store.collection("c")
        ids = [coll.insert({"k": k}) for k in range(4)]
        found = coll.find({"_id": {"$in": ids[1:3]}})
        assert [doc["k"] for doc in found] == [1, 2]
        assert coll.find({"_id": {"$in": []}}) == []

    def test_update_set(self, memory_store):
        coll = memory_store.collection("c")
        doc_id = coll.insert({"retrievalTime": 0.0})
        coll.update({"_id": doc_id}, {"$set": {"retrievalTime": 1.5}})
        assert coll.find_one({"_id": doc_id})["retrievalTime"] == 1.5

    def test_update_rejects_other_operators(self, memory_store):
        coll = memory_store.collection("c")
        doc_id = coll.insert({"n": 0})
        with pytest.raises(StorageWriteError):
            coll.update({"_id": doc_id}, {"$inc": {"n": 1}})

    def test_delete(self, memory_store):
        coll = memory_store.collection("c")
        doc_id = coll.insert({"a": 1})
        coll.insert({"a": 2})
        assert coll.delete({"_id": doc_id}) == 1
        assert coll.count() == 1
        assert coll.delete({}) == 1
        assert coll.count() == 0

    def test_collections_are_isolated(self, memory_store):
        memory_store.collection("a").insert({"x": 1})
        assert memory_store.collection("b").count() == 0
        assert memory_store.collection("a").count() == 1

    def test_drop_collection(self, memory_store):
        memory_store.collection("a").insert({"x": 1})
        memory_store.drop_collection("a")
        assert memory_store.collection("a").count() == 0
        memory_store.drop_collection("missing")

    def test_context_manager(self):
        with MemoryStore() as store:
            assert store.backend_name == "memory"


def _mongo_collection():
    pymongo_coll = MagicMock()
    pymongo_coll.name = "testcollection"
    return pymongo_coll, MongoCollection(pymongo_coll)


class TestMongoCollection:
    """pymongo exception translation."""

    def test_insert_returns_inserted_id(self):
        pymongo_coll, coll = _mongo_collection()
        pymongo_coll.insert_one.return_value.inserted_id = "abc"
        assert coll.insert({"a": 1}) == "abc"
        pymongo_coll.insert_one.assert_called_once_with({"a": 1})

    def test_insert_failure(self):
        pymongo_coll, coll = _mongo_collection()
        pymongo_coll.insert_one.side_effect = WriteError("disk full", code=1)
        with pytest.raises(StorageWriteError) as exc_info:
            coll.insert({"a": 1})
        assert exc_info.value.code == ErrorCode.STORAGE_WRITE_FAILED
        assert exc_info.value.context == {"operation": "insert", "collection": "testcollection"}

    def test_insert_invalid_document(self):
        pymongo_coll, coll = _mongo_collection()
        pymongo_coll.insert_one.side_effect = InvalidDocument("cannot encode object")
        with pytest.raises(SerializationError):
            coll.insert({"a": object()})

    def test_find_materializes_cursor(self):
        pymongo_coll, coll = _mongo_collection()
        pymongo_coll.find.return_value = iter([{"a": 1}, {"a": 2}])
        assert coll.find() == [{"a": 1}, {"a": 2}]
        pymongo_coll.find.assert_called_once_with({})

    def test_find_failure(self):
        pymongo_coll, coll = _mongo_collection()
        pymongo_coll.find.side_effect = OperationFailure("boom")
        with pytest.raises(StorageReadError) as exc_info:
            coll.find({})
        assert exc_info.value.context["operation"] == "find"

    def test_find_one_failure(self):
        pymongo_coll, coll = _mongo_collection()
        pymongo_coll.find_one.side_effect = ServerSelectionTimeoutError("timeout")
        with pytest.raises(StorageReadError) as exc_info:
            coll.find_one({"_id": 1})
        assert exc_info.value.context["operation"] == "find_one"

    def test_update_failure(self):
        pymongo_coll, coll = _mongo_collection()
        pymongo_coll.update_one.side_effect = OperationFailure("boom")
        with pytest.raises(StorageWriteError) as exc_info:
            coll.update({"_id": 1}, {"$set": {"retrievalTime": 1.0}})
        assert exc_info.value.context["operation"] == "update"

    def test_delete_returns_count(self):
        pymongo_coll, coll = _mongo_collection()
        pymongo_coll.delete_many.return_value.deleted_count = 3
        assert coll.delete({}) == 3

    def test_delete_failure(self):
        pymongo_coll, coll = _mongo_collection()
        pymongo_coll.delete_many.side_effect = OperationFailure("boom")
        with pytest.raises(StorageWriteError):
            coll.delete({"_id": 1})


class TestMongoStore:
    def test_connect_pings(self):
        client = MagicMock()
        store = MongoStore(database="bench", client=client)
        client.admin.command.assert_called_once_with("ping")
        assert store.backend_name == "mongo"
        assert store.database_name == "bench"

    def test_unreachable_server(self):
        client = MagicMock()
        client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")
        with pytest.raises(StorageConnectionError) as exc_info:
            MongoStore(client=client)
        assert exc_info.value.code == ErrorCode.STORAGE_CONNECTION_FAILED
        assert exc_info.value.context["backend"] == "mongo"
        client.close.assert_called_once()

    def test_rejected_credentials(self):
        """Authentication failure on ping is a connection error, and the client is closed."""
        client = MagicMock()
        client.admin.command.side_effect = OperationFailure("Authentication failed.", code=18)
        with pytest.raises(StorageConnectionError) as exc_info:
            MongoStore(client=client)
        assert exc_info.value.code == ErrorCode.STORAGE_CONNECTION_FAILED
        assert "Authentication failed" in exc_info.value.details
        client.close.assert_called_once()

    def test_invalid_uri(self):
        with pytest.raises(StorageConnectionError):
            MongoStore(uri="not-a-mongodb-uri")

    def test_collection_wraps_pymongo(self):
        client = MagicMock()
        store = MongoStore(database="bench", client=client)
        client.__getitem__.return_value.__getitem__.return_value.name = "c1"
        coll = store.collection("c1")
        assert isinstance(coll, MongoCollection)
        assert coll.name == "c1"

    def test_close(self):
        client = MagicMock()
        MongoStore(client=client).close()
        client.close.assert_called_once()

    def test_drop_failure(self):
        client = MagicMock()
        store = MongoStore(client=client)
        client.__getitem__.return_value.drop_collection.side_effect = OperationFailure("boom")
        with pytest.raises(StorageWriteError):
            store.drop_collection("c1")


class TestGetStore:
    def test_memory(self):
        store = get_store("memory", HarnessConfig(backend="memory"))
        assert isinstance(store, MemoryStore)

    def test_unknown_backend(self):
        with pytest.raises(ConfigError) as exc_info:
            get_store("redis", HarnessConfig())
        assert exc_info.value.context["parameter"] == "backend"

    def test_configuration_error_from_driver(self, monkeypatch):
        def fake_client(*args, **kwargs):
            raise ConfigurationError("bad option")

        monkeypatch.setattr("arraybench.storage.mongo.MongoClient", fake_client)
        with pytest.raises(StorageConnectionError):
            get_store("mongo", HarnessConfig())
