"""
Collection naming strategies.

A namer is called with the swept size (or None for a run-wide collection)
and returns the collection name to write into.
"""
from datetime import datetime
from typing import Callable, Optional

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def _with_size(prefix: str, n: Optional[int]) -> str:
    if n is None:
        return prefix
    return f"{prefix}_N={n}"


class TimestampNamer:
    """``testcollection_20250101_120000`` / ``testcollection_N=8_20250101_120000``."""

    def __init__(self, prefix: str = "testcollection", clock: Callable[[], datetime] = datetime.now):
        self.prefix = prefix
        self.clock = clock

    def __call__(self, n: Optional[int] = None) -> str:
        return f"{_with_size(self.prefix, n)}_{self.clock().strftime(TIMESTAMP_FORMAT)}"


class CounterNamer:
    """Monotonic counter suffix; deterministic and collision-free within a process."""

    def __init__(self, prefix: str = "testcollection", start: int = 0):
        self.prefix = prefix
        self._next = start

    def __call__(self, n: Optional[int] = None) -> str:
        name = f"{_with_size(self.prefix, n)}_{self._next}"
        self._next += 1
        return name


class FixedNamer:
    """Always the same base name."""

    def __init__(self, name: str):
        self.name = name

    def __call__(self, n: Optional[int] = None) -> str:
        return _with_size(self.name, n)
