"""
Shared pytest fixtures for arraybench tests.

Provides:
- Seeded random source and deterministic ObjectId factory
- In-memory document store
- A store whose writes fail once a given array size is reached
"""

import itertools
import random
from datetime import datetime

import pytest
from bson import ObjectId

from arraybench.config import HarnessConfig
from arraybench.errors import StorageWriteError
from arraybench.storage.memory import MemoryCollection, MemoryStore


@pytest.fixture
def rng():
    """Seeded random source so synthesized documents are repeatable."""
    return random.Random(1234)


@pytest.fixture
def id_factory():
    """ObjectIds from a counter: 000...001, 000...002, ..."""
    counter = itertools.count(1)
    return lambda: ObjectId(f"{next(counter):024x}")


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2025, 1, 2, 3, 4, 5)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def memory_config(tmp_path):
    """Small per-document sweep against the in-memory backend."""
    return HarnessConfig(
        run_id="test_run",
        backend="memory",
        ceiling=10,
        seed_pair=(1, 2),
        random_seed=7,
        output_base=str(tmp_path),
    )


class FailingCollection(MemoryCollection):
    """Memory collection whose inserts fail for documents with >= fail_at objects."""

    def __init__(self, name, fail_at):
        super().__init__(name)
        self.fail_at = fail_at

    def insert(self, document):
        if len(document["objects"]) >= self.fail_at:
            raise StorageWriteError(
                "Failed to insert document",
                details="simulated write failure",
                operation="insert",
                collection=self.name,
            )
        return super().insert(document)


class FailingStore(MemoryStore):
    def __init__(self, fail_at):
        super().__init__()
        self.fail_at = fail_at

    def collection(self, name):
        if name not in self.collections:
            self.collections[name] = FailingCollection(name, self.fail_at)
        return self.collections[name]


@pytest.fixture
def failing_store():
    """Factory: failing_store(fail_at) -> store failing inserts from that size on."""
    return FailingStore
