"""Declarative pattern tables driving classification, auditing and extraction.

Every table is read-only and built once at import time. Declaration order is
iteration order: the classifier breaks ties in favour of the type declared
first, and missing fields are reported in the order listed here.

Field names are shared between ``EXPECTED_FIELD_PATTERNS``,
``EXTRACTION_PATTERNS`` and ``RECOMMENDATION_TEMPLATES`` but the tables are
independent; a field may appear in any subset of them.
"""

import re
from types import MappingProxyType
from typing import Mapping, Pattern, Tuple

from app.models.analysis import DocumentType

FieldPatterns = Tuple[Tuple[str, Pattern[str]], ...]


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def _fields(*pairs: Tuple[str, str]) -> FieldPatterns:
    return tuple((name, _compile(pattern)) for name, pattern in pairs)


# ---------------------------------------------------------------------------
# Classification: each matching pattern adds 1 to the type's score
# ---------------------------------------------------------------------------

CLASSIFICATION_PATTERNS: Mapping[DocumentType, Tuple[Pattern[str], ...]] = MappingProxyType({
    DocumentType.INVOICE: tuple(_compile(p) for p in (
        r"invoice",
        r"bill\s?to",
        r"amount\s?due",
        r"invoice\s?(number|#)",
    )),
    DocumentType.CONTRACT: tuple(_compile(p) for p in (
        r"agreement",
        r"contract",
        r"party\s?(a|b|1|2)",
        r"terms\s?and\s?conditions",
        r"witness",
    )),
    DocumentType.REPORT: tuple(_compile(p) for p in (
        r"report",
        r"analysis",
        r"summary",
        r"findings",
        r"conclusion",
    )),
})


# ---------------------------------------------------------------------------
# Expected fields: presence markers, absence is reported as missing
# ---------------------------------------------------------------------------

EXPECTED_FIELD_PATTERNS: Mapping[DocumentType, FieldPatterns] = MappingProxyType({
    DocumentType.CONTRACT: _fields(
        ("party_1", r"party\s?(a|1)"),
        ("party_2", r"party\s?(b|2)"),
        ("signature", r"signature"),
        ("date", r"(effective\s)?date"),
        ("payment_terms", r"payment\s?terms"),
    ),
    DocumentType.INVOICE: _fields(
        ("invoice_number", r"invoice\s?(number|#|no\.?)"),
        ("amount", r"(total|amount)\s?due"),
        ("due_date", r"due\s?date"),
        ("tax", r"tax|gst|vat"),
        ("bill_to", r"bill\s?to"),
        ("bill_from", r"bill\s?from"),
    ),
})


# ---------------------------------------------------------------------------
# Extraction: group 1 of the first match is the field value
# ---------------------------------------------------------------------------

EXTRACTION_PATTERNS: Mapping[DocumentType, FieldPatterns] = MappingProxyType({
    DocumentType.INVOICE: _fields(
        ("invoice_number", r"invoice\s?(?:number|#|no\.?)\s*[:\-]?\s*([A-Z0-9\-]+)"),
        ("amount", r"(?:total|amount)\s?due\s*[:\-]?\s*[$€£₹]?\s*([\d,]+\.?\d*)"),
        ("due_date", r"(?:due\s?date)\s*[:\-]?\s*(\w+\s\d{1,2},?\s\d{4}|\d{1,2}[-\/]\d{1,2}[-\/]\d{2,4})"),
        # Spans lines up to the next section marker or end of text
        ("bill_to", r"bill\s?to\s*:\s*([\s\S]*?)(?=bill\s?from|ship\s?to|notes|terms|$)"),
    ),
    # Single-line values end at any line terminator, a lone \r included
    DocumentType.CONTRACT: _fields(
        ("party_1", r"party\s?(?:a|1)\s*:\s*([^\r\n\u2028\u2029]*)"),
        ("party_2", r"party\s?(?:b|2)\s*:\s*([^\r\n\u2028\u2029]*)"),
        ("effective_date", r"(?:effective\sdate)\s*:\s*([^\r\n\u2028\u2029]*)"),
    ),
})


# ---------------------------------------------------------------------------
# Remediation text per missing field
# ---------------------------------------------------------------------------

RECOMMENDATION_TEMPLATES: Mapping[str, str] = MappingProxyType({
    # Invoice fields
    "invoice_number": "Action: Add a unique invoice number (e.g., 'INV-001') for tracking and reference.",
    "amount": "Action: Specify the total amount due to ensure correct payment.",
    "due_date": "Action: Include a clear due date to avoid late payments.",
    "tax": "Action: Detail any applicable taxes (e.g., GST, VAT) or state that taxes are included.",
    "bill_to": "Action: Add the recipient's full name and address under a 'Bill To' section.",
    "bill_from": "Action: Add the sender's full name and address under a 'Bill From' or company letterhead.",
    # Contract fields
    "party_1": "Action: Clearly identify the first party (e.g., 'Party A', 'the Client') with their legal name and address.",
    "party_2": "Action: Clearly identify the second party (e.g., 'Party B', 'the Contractor') with their legal name and address.",
    "signature": "Action: Add a signature line for all parties to formally execute the agreement.",
    "date": "Action: Include the effective date or execution date of the contract.",
    "payment_terms": "Action: Specify the payment terms, including amounts, schedule, and method.",
})

FALLBACK_RECOMMENDATION = "Action: Ensure the '{field}' is included."
