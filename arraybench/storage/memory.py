"""
In-memory Store: process-local storage collaborator.

Documents are held as BSON bytes so every read goes through a real
decode, the same way a driver read would. Filters support top-level
equality and ``$in``; updates support ``$set``.
"""
import logging
from typing import Any, Dict, List, Optional

import bson
from bson import ObjectId

from arraybench.codec import serialize
from arraybench.errors import StorageWriteError
from arraybench.storage.base import DocumentCollection, DocumentStore

logger = logging.getLogger(__name__)


def _matches(document: Dict[str, Any], filter: Optional[Dict[str, Any]]) -> bool:
    if not filter:
        return True
    for key, expected in filter.items():
        if key not in document:
            return False
        if isinstance(expected, dict) and "$in" in expected:
            if document[key] not in expected["$in"]:
                return False
        elif document[key] != expected:
            return False
    return True


class MemoryCollection(DocumentCollection):
    """Ordered list of encoded documents."""

    def __init__(self, name: str):
        super().__init__(name)
        self._records: List[bytes] = []

    def _decoded(self) -> List[Dict[str, Any]]:
        return [bson.decode(raw) for raw in self._records]

    def insert(self, document: Dict[str, Any]) -> Any:
        stored = dict(document)
        if "_id" not in stored:
            stored = {"_id": ObjectId(), **stored}
        if self.find_one({"_id": stored["_id"]}) is not None:
            raise StorageWriteError(
                "Failed to insert document",
                details=f"Duplicate key _id={stored['_id']}",
                operation="insert",
                collection=self.name,
            )
        self._records.append(serialize(stored))
        return stored["_id"]

    def find(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return [doc for doc in self._decoded() if _matches(doc, filter)]

    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for doc in self._decoded():
            if _matches(doc, filter):
                return doc
        return None

    def update(self, filter: Dict[str, Any], patch: Dict[str, Any]) -> None:
        unsupported = [op for op in patch if op != "$set"]
        if unsupported:
            raise StorageWriteError(
                "Failed to update document with retrieval time",
                details=f"Unsupported update operators: {unsupported}",
                operation="update",
                collection=self.name,
            )
        for i, raw in enumerate(self._records):
            doc = bson.decode(raw)
            if _matches(doc, filter):
                doc.update(patch.get("$set", {}))
                self._records[i] = serialize(doc)
                return

    def delete(self, filter: Dict[str, Any]) -> int:
        kept = [raw for raw in self._records if not _matches(bson.decode(raw), filter)]
        deleted = len(self._records) - len(kept)
        self._records = kept
        return deleted

    def count(self) -> int:
        return len(self._records)


class MemoryStore(DocumentStore):
    """Storage collaborator kept entirely in process memory."""

    def __init__(self):
        self.collections: Dict[str, MemoryCollection] = {}

    @property
    def backend_name(self) -> str:
        return "memory"

    def collection(self, name: str) -> MemoryCollection:
        if name not in self.collections:
            self.collections[name] = MemoryCollection(name)
        return self.collections[name]

    def drop_collection(self, name: str) -> None:
        self.collections.pop(name, None)
