"""
Document Store: abstract base classes for the storage collaborator.

Stores wrap a document database behind a uniform interface so the runner
can time inserts and read-backs against MongoDB or the in-memory backend.
Implementations raise arraybench.errors exceptions, never driver exceptions.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class DocumentCollection(ABC):
    """Handle on one named collection."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def insert(self, document: Dict[str, Any]) -> Any:
        """Insert one document.

        Returns:
            The generated identifier.

        Raises:
            StorageWriteError, SerializationError
        """
        ...

    @abstractmethod
    def find(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return every document matching ``filter`` (all when None).

        Raises:
            StorageReadError
        """
        ...

    @abstractmethod
    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the first matching document, or None.

        Raises:
            StorageReadError
        """
        ...

    @abstractmethod
    def update(self, filter: Dict[str, Any], patch: Dict[str, Any]) -> None:
        """Apply an update document (``{"$set": {...}}``) to one match.

        Raises:
            StorageWriteError
        """
        ...

    @abstractmethod
    def delete(self, filter: Dict[str, Any]) -> int:
        """Delete every match. Returns the number deleted.

        Raises:
            StorageWriteError
        """
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class DocumentStore(ABC):
    """Abstract storage collaborator (one database on one server)."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Human-readable name (e.g. 'mongo', 'memory')."""
        ...

    @abstractmethod
    def collection(self, name: str) -> DocumentCollection:
        ...

    @abstractmethod
    def drop_collection(self, name: str) -> None:
        """Raises StorageWriteError."""
        ...

    def close(self) -> None:
        """Release connections. No-op by default."""

    def __enter__(self) -> "DocumentStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
