"""Storage collaborators: factory for store instances."""
from arraybench.errors import ConfigError
from arraybench.storage.base import DocumentCollection, DocumentStore

BACKENDS = ("mongo", "memory")


def get_store(backend: str, config) -> DocumentStore:
    """Create and connect a document store.

    Args:
        backend: "mongo" | "memory"
        config: HarnessConfig (connection_uri, database,
            server_selection_timeout_ms)
    """
    if backend == "mongo":
        from arraybench.storage.mongo import MongoStore
        return MongoStore(
            uri=config.connection_uri,
            database=config.database,
            server_selection_timeout_ms=config.server_selection_timeout_ms,
        )
    elif backend == "memory":
        from arraybench.storage.memory import MemoryStore
        return MemoryStore()
    else:
        raise ConfigError(
            "Unknown storage backend: " + backend,
            details=f"Expected one of {', '.join(BACKENDS)}",
            parameter="backend",
            received=backend,
        )


__all__ = ["BACKENDS", "DocumentCollection", "DocumentStore", "get_store"]
