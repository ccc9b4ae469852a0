"""
Test documents and the Document Synthesizer.

A TestDocument carries an embedded ``objects`` array whose length is the
swept parameter N. Field names on the BSON side follow the camelCase names
used by the stored records (``sizeInBytes``, ``insertionTime``, ...).
"""
import random
import string
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from bson import ObjectId

from arraybench.errors import ConfigError

DATA_LENGTH = 12
MIN_IDS = 5
MAX_IDS = 20
CHARSET = string.ascii_letters
INSERTION_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

IdFactory = Callable[[], Any]


@dataclass
class NestedObject:
    """One entry of the embedded array. ``flag`` is stored as ``bool``."""

    order: int
    data: str
    flag: bool
    ids: List[Any] = field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        return {
            "order": self.order,
            "data": self.data,
            "bool": self.flag,
            "ids": list(self.ids),
        }

    @classmethod
    def from_document(cls, d: Dict[str, Any]) -> "NestedObject":
        return cls(
            order=d["order"],
            data=d["data"],
            flag=d["bool"],
            ids=list(d.get("ids", [])),
        )


@dataclass
class TestDocument:
    """The record inserted once per repetition of a swept size."""

    # Not a pytest test class
    __test__ = False

    objects: List[NestedObject] = field(default_factory=list)
    size_in_bytes: int = 0
    insertion_time: str = ""
    retrieval_time: float = 0.0
    id: Optional[Any] = None

    @property
    def object_count(self) -> int:
        return len(self.objects)

    def to_document(self) -> Dict[str, Any]:
        """BSON-ready dict; ``_id`` is omitted until the store assigns one."""
        d: Dict[str, Any] = {}
        if self.id is not None:
            d["_id"] = self.id
        d["objects"] = [obj.to_document() for obj in self.objects]
        d["sizeInBytes"] = self.size_in_bytes
        d["insertionTime"] = self.insertion_time
        d["retrievalTime"] = self.retrieval_time
        return d

    @classmethod
    def from_document(cls, d: Dict[str, Any]) -> "TestDocument":
        return cls(
            objects=[NestedObject.from_document(o) for o in d.get("objects", [])],
            size_in_bytes=d.get("sizeInBytes", 0),
            insertion_time=d.get("insertionTime", ""),
            retrieval_time=d.get("retrievalTime", 0.0),
            id=d.get("_id"),
        )


def random_string(length: int, rng: random.Random) -> str:
    """Random string of ASCII letters."""
    return "".join(rng.choice(CHARSET) for _ in range(length))


def random_object_ids(count: int, id_factory: IdFactory = ObjectId) -> List[Any]:
    """Generate ``count`` fresh identifiers."""
    return [id_factory() for _ in range(count)]


def synthesize(
    n: int,
    rng: Optional[random.Random] = None,
    id_factory: Optional[IdFactory] = None,
) -> TestDocument:
    """Build a TestDocument whose ``objects`` array has exactly ``n`` entries.

    Args:
        n: Array length (the swept parameter)
        rng: Random source; a fresh unseeded ``random.Random`` when omitted
        id_factory: Zero-argument callable producing identifiers
            (defaults to ``bson.ObjectId``)

    Returns:
        A new TestDocument with size/time fields at their zero values.
    """
    if n < 0:
        raise ConfigError(
            "Object count must be non-negative",
            parameter="n",
            received=n,
        )
    rng = rng or random.Random()
    id_factory = id_factory or ObjectId

    objects = []
    for i in range(n):
        objects.append(NestedObject(
            order=i,
            data=random_string(DATA_LENGTH, rng),
            flag=rng.randrange(2) == 0,
            ids=random_object_ids(MIN_IDS + rng.randrange(MAX_IDS - MIN_IDS + 1), id_factory),
        ))
    return TestDocument(objects=objects)
