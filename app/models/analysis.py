"""Pydantic models for document analysis results.

The analysis pipeline produces one ``AnalysisResult`` per uploaded document.
Once stored it gains a server-assigned ``id`` and ``analyzed_at`` timestamp
(``StoredAnalysis``). Results are never mutated after creation.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class DocumentType(str, Enum):
    """Coarse document categories assigned by the classifier."""

    INVOICE = "Invoice"
    CONTRACT = "Contract"
    REPORT = "Report"
    OTHER = "Other"


class ClassificationResult(BaseModel):
    """Result of scoring normalized text against the classification table."""

    model_config = ConfigDict(frozen=True)

    doc_type: DocumentType = Field(description="Best scoring document type")
    confidence: float = Field(
        ge=0.0, le=1.0,
        description="Classification confidence (0.0 to 1.0, two decimals)"
    )
    score: int = Field(
        ge=0,
        description="Number of classification patterns that matched"
    )
    signals: Dict[str, Any] = Field(
        default_factory=dict,
        description="Debug info: matched pattern sources for the chosen type"
    )


class AnalysisResult(BaseModel):
    """Output record of one analyze request."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(description="Original uploaded filename")
    text: str = Field(description="Normalized document text")
    doc_type: DocumentType
    confidence: float = Field(ge=0.0, le=1.0)
    missing_fields: List[str] = Field(
        default_factory=list,
        description="Expected fields absent from the text, in table order"
    )
    extracted_fields: Dict[str, str] = Field(
        default_factory=dict,
        description="Captured field values; absent key means not found"
    )
    recommendations: List[str] = Field(
        default_factory=list,
        description="One remediation message per missing field, same order"
    )


class StoredAnalysis(AnalysisResult):
    """An analysis after persistence."""

    id: int
    analyzed_at: datetime


class HistoryItem(BaseModel):
    """Summary row for the history list."""

    id: int
    filename: str
    doc_type: DocumentType
    analyzed_at: datetime
