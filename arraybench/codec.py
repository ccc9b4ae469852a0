"""
BSON serialization used to measure document size.

The size is measured independently of the driver's own wire encoding on
insert; both use the same BSON rules, so the numbers agree.
"""
from typing import Any, Dict, Union

import bson
from bson.errors import BSONError

from arraybench.documents import TestDocument
from arraybench.errors import SerializationError


def serialize(document: Union[TestDocument, Dict[str, Any]]) -> bytes:
    """Encode a document to BSON.

    Raises:
        SerializationError: the document holds values BSON cannot encode
    """
    if isinstance(document, TestDocument):
        document = document.to_document()
    try:
        return bson.encode(document)
    except (BSONError, TypeError, ValueError, OverflowError) as e:
        raise SerializationError(
            "Failed to calculate document size",
            details=str(e),
        ) from e


def document_size(document: Union[TestDocument, Dict[str, Any]]) -> int:
    """Byte length of the BSON form."""
    return len(serialize(document))


# Size of synthesize(0): no nested objects, size/time fields at zero values
EMPTY_DOCUMENT_SIZE = document_size(TestDocument())
