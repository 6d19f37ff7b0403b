"""Pattern-count document classifier.

Scores normalized text against every type in ``CLASSIFICATION_PATTERNS``.
Each pattern contributes at most 1 to its type's score, no matter how many
times it matches. The highest score wins; on a tie the type declared first
keeps the lead.

Confidence follows a saturating curve, ``score / (score + 3)``, so more
corroborating patterns push it towards (but never to) 1.0. When nothing
matches at all the document is reported as ``Other`` with a fixed 0.90.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Mapping, Pattern, Tuple

from app.models.analysis import ClassificationResult, DocumentType
from app.services.patterns import CLASSIFICATION_PATTERNS

logger = logging.getLogger(__name__)

NO_SIGNAL_CONFIDENCE = 0.90
CONFIDENCE_DAMPING = 3


def _matched_patterns(text: str, patterns: Tuple[Pattern[str], ...]) -> List[str]:
    return [p.pattern for p in patterns if p.search(text)]


def _round_confidence(value: float) -> float:
    """Round to two decimals, halves away from zero (0.625 -> 0.63)."""
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def classify_document(
    text: str,
    table: Mapping[DocumentType, Tuple[Pattern[str], ...]] = CLASSIFICATION_PATTERNS,
) -> ClassificationResult:
    """Classify normalized text into a DocumentType.

    Args:
        text: Normalized document text (may be empty).
        table: Classification table; defaults to the built-in patterns.

    Returns:
        ClassificationResult with doc_type, confidence, score and the
        matched pattern sources of the winning type.
    """
    best_type = DocumentType.OTHER
    best_score = 0
    best_hits: List[str] = []

    for doc_type, patterns in table.items():
        hits = _matched_patterns(text, patterns)
        logger.debug("Classifier score %s=%d", doc_type.value, len(hits))
        if len(hits) > best_score:
            best_type, best_score, best_hits = doc_type, len(hits), hits

    if best_score == 0:
        return ClassificationResult(
            doc_type=DocumentType.OTHER,
            confidence=NO_SIGNAL_CONFIDENCE,
            score=0,
            signals={"reason": "no_pattern_matched"},
        )

    confidence = _round_confidence(best_score / (best_score + CONFIDENCE_DAMPING))
    return ClassificationResult(
        doc_type=best_type,
        confidence=confidence,
        score=best_score,
        signals={"matched_patterns": best_hits},
    )
