"""
MongoDB Store: pymongo-backed storage collaborator.

Connecting issues a ``ping`` so an unreachable server or rejected credentials
fail up front with StorageConnectionError rather than on the first insert.
"""
import logging
from typing import Any, Dict, List, Optional

from bson.errors import InvalidDocument
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConfigurationError, PyMongoError

from arraybench.errors import (
    SerializationError,
    StorageConnectionError,
    StorageReadError,
    StorageWriteError,
)
from arraybench.storage.base import DocumentCollection, DocumentStore

logger = logging.getLogger(__name__)

_DEFAULT_URI = "mongodb://localhost:27017"
_DEFAULT_DATABASE = "testdb"


class MongoCollection(DocumentCollection):
    """DocumentCollection over a pymongo Collection."""

    def __init__(self, collection: Collection):
        super().__init__(collection.name)
        self._collection = collection

    def insert(self, document: Dict[str, Any]) -> Any:
        try:
            result = self._collection.insert_one(document)
        except InvalidDocument as e:
            raise SerializationError("Failed to encode document for insert", details=str(e)) from e
        except PyMongoError as e:
            raise StorageWriteError(
                "Failed to insert document",
                details=str(e),
                operation="insert",
                collection=self.name,
            ) from e
        return result.inserted_id

    def find(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        try:
            return list(self._collection.find(filter or {}))
        except PyMongoError as e:
            raise StorageReadError(
                "Failed to retrieve documents",
                details=str(e),
                operation="find",
                collection=self.name,
            ) from e

    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return self._collection.find_one(filter)
        except PyMongoError as e:
            raise StorageReadError(
                "Failed to retrieve document",
                details=str(e),
                operation="find_one",
                collection=self.name,
            ) from e

    def update(self, filter: Dict[str, Any], patch: Dict[str, Any]) -> None:
        try:
            self._collection.update_one(filter, patch)
        except PyMongoError as e:
            raise StorageWriteError(
                "Failed to update document with retrieval time",
                details=str(e),
                operation="update",
                collection=self.name,
            ) from e

    def delete(self, filter: Dict[str, Any]) -> int:
        try:
            return self._collection.delete_many(filter).deleted_count
        except PyMongoError as e:
            raise StorageWriteError(
                "Failed to delete document",
                details=str(e),
                operation="delete",
                collection=self.name,
            ) from e

    def count(self) -> int:
        try:
            return self._collection.count_documents({})
        except PyMongoError as e:
            raise StorageReadError(
                "Failed to count documents",
                details=str(e),
                operation="count",
                collection=self.name,
            ) from e


class MongoStore(DocumentStore):
    """Storage collaborator backed by a MongoDB server."""

    def __init__(
        self,
        uri: str = _DEFAULT_URI,
        database: str = _DEFAULT_DATABASE,
        server_selection_timeout_ms: int = 5000,
        client: Optional[MongoClient] = None,
    ):
        self.uri = uri
        self.database_name = database
        try:
            self._client = client or MongoClient(
                uri, serverSelectionTimeoutMS=server_selection_timeout_ms
            )
        except ConfigurationError as e:
            raise StorageConnectionError(
                "Failed to create MongoDB client",
                details=str(e),
                backend="mongo",
            ) from e
        try:
            self._client.admin.command("ping")
        except PyMongoError as e:
            # Unreachable server, failed authentication, ...
            self._client.close()
            raise StorageConnectionError(
                "Failed to connect to MongoDB",
                details=str(e),
                backend="mongo",
            ) from e
        self._db = self._client[database]
        logger.info(f"Connected to MongoDB, database={database}")

    @property
    def backend_name(self) -> str:
        return "mongo"

    def collection(self, name: str) -> MongoCollection:
        return MongoCollection(self._db[name])

    def drop_collection(self, name: str) -> None:
        try:
            self._db.drop_collection(name)
        except PyMongoError as e:
            raise StorageWriteError(
                "Failed to drop collection",
                details=str(e),
                operation="drop",
                collection=name,
            ) from e

    def close(self) -> None:
        self._client.close()
