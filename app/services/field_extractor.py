"""Capture literal field values from normalized document text.

Each field of the document type's extraction set is matched once against the
full text (first match only). Group 1 of the match is the value; it is
trimmed and internal whitespace runs, including line breaks from multi-line
captures such as ``bill_to``, are collapsed to single spaces.

A field whose pattern does not match, or whose group 1 is empty, is left out
of the result entirely. Callers tell "not found" apart by key absence.
"""

import logging
import re
from typing import Dict, Mapping

from app.models.analysis import DocumentType
from app.services.patterns import EXTRACTION_PATTERNS, FieldPatterns

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")


def clean_value(raw: str) -> str:
    """Trim a captured value and collapse internal whitespace runs."""
    return _WHITESPACE_RUN.sub(" ", raw.strip())


def extract_fields(
    text: str,
    doc_type: DocumentType,
    table: Mapping[DocumentType, FieldPatterns] = EXTRACTION_PATTERNS,
) -> Dict[str, str]:
    """Extract known field values for a document type.

    Args:
        text: Normalized document text.
        doc_type: Classified document type.
        table: Extraction table; defaults to the built-in patterns.

    Returns:
        Mapping of field name to captured value, in table order. Empty when
        the type has no extraction set.
    """
    fields = table.get(doc_type)
    if not fields:
        return {}

    extracted: Dict[str, str] = {}
    for name, pattern in fields:
        match = pattern.search(text)
        if match is None:
            continue
        raw = match.group(1)
        if raw:
            extracted[name] = clean_value(raw)
        else:
            logger.debug("Field %s matched with an empty capture", name)
    return extracted
