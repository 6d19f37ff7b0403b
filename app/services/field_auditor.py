"""Detect expected fields that are absent from a document."""

from typing import List, Mapping

from app.models.analysis import DocumentType
from app.services.patterns import EXPECTED_FIELD_PATTERNS, FieldPatterns


def find_missing_fields(
    text: str,
    doc_type: DocumentType,
    table: Mapping[DocumentType, FieldPatterns] = EXPECTED_FIELD_PATTERNS,
) -> List[str]:
    """Return the names of expected fields whose marker never appears in text.

    Types without an entry in the table have no schema and never report
    missing fields. Output follows table declaration order.
    """
    fields = table.get(doc_type)
    if not fields:
        return []
    return [name for name, pattern in fields if not pattern.search(text)]
