"""
Document analysis orchestrator.

Runs the pipeline strictly in order:

1. Normalize the raw extracted text
2. Classify the normalized text
3. Audit missing fields for the classified type
4. Extract field values for the classified type
5. Generate one recommendation per missing field

``analyze_text`` is pure. ``analyze`` additionally hands the result to the
document store and returns the stored record; a storage failure fails the
whole request.
"""

import logging
from typing import Optional

from supabase import Client

from app.db.documents import create_document
from app.models.analysis import AnalysisResult, StoredAnalysis
from app.services.document_classifier import classify_document
from app.services.field_auditor import find_missing_fields
from app.services.field_extractor import extract_fields
from app.services.recommendations import generate_recommendations
from app.utils.normalizers import normalize_text

logger = logging.getLogger(__name__)


def analyze_text(text: str, filename: str) -> AnalysisResult:
    """Run the full analysis pipeline over raw extracted text.

    Args:
        text: Raw text from the PDF text extractor.
        filename: Original uploaded filename, carried into the result.

    Returns:
        AnalysisResult
    """
    normalized = normalize_text(text)
    classification = classify_document(normalized)
    doc_type = classification.doc_type
    missing_fields = find_missing_fields(normalized, doc_type)
    extracted_fields = extract_fields(normalized, doc_type)
    recommendations = generate_recommendations(missing_fields)

    logger.info(
        "Analyzed %s: doc_type=%s confidence=%.2f missing=%d extracted=%d",
        filename,
        doc_type.value,
        classification.confidence,
        len(missing_fields),
        len(extracted_fields),
    )

    return AnalysisResult(
        filename=filename,
        text=normalized,
        doc_type=doc_type,
        confidence=classification.confidence,
        missing_fields=missing_fields,
        extracted_fields=extracted_fields,
        recommendations=recommendations,
    )


async def analyze(
    text: str,
    filename: str,
    client: Client,
    table: Optional[str] = None,
) -> StoredAnalysis:
    """Analyze text and persist the result.

    Raises:
        PersistenceError: If the document store rejects the write
    """
    result = analyze_text(text, filename)
    return await create_document(client, result, table=table)
