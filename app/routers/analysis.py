"""
Document analysis API endpoint.

Accepts a PDF upload, extracts its text, runs the analysis pipeline and
stores the result.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Request, Response, UploadFile, status

from app.config import get_settings
from app.db.documents import PersistenceError
from app.db.supabase_client import get_supabase_client
from app.middleware.rate_limit import get_limiter
from app.services.analyzer import analyze
from app.services.file_validator import validate_pdf
from app.services.pdf_text_extractor import ExtractionError, extract_text_from_bytes

router = APIRouter(tags=["analysis"])
limiter = get_limiter()
logger = logging.getLogger(__name__)


@router.post("/analyze", status_code=status.HTTP_201_CREATED)
@limiter.limit(lambda: get_settings().analyze_rate_limit)  # type: ignore[untyped-decorator]
async def analyze_pdf(
    request: Request,
    file: Optional[UploadFile] = File(None, description="PDF file to analyze"),
) -> Response:
    """
    Analyze an uploaded PDF and store the result.

    This endpoint:
    1. Validates the uploaded PDF file
    2. Extracts its text with OpenDataLoader
    3. Normalizes, classifies, audits, extracts fields and builds recommendations
    4. Stores the analysis and returns it with its id

    Returns:
        201: Analysis stored
        400: Empty or non-PDF upload
        413: File too large
        422: Text could not be extracted from the PDF
        503: Document store unavailable
    """
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded."
        )

    content, filename = await validate_pdf(file)

    try:
        raw_text = await extract_text_from_bytes(content)
    except ExtractionError as e:
        logger.warning("Text extraction failed for %s: %s", filename, e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Failed to extract text from PDF: {str(e)}"
        )

    try:
        stored = await analyze(raw_text, filename, get_supabase_client())
    except (PersistenceError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database error: {str(e)}"
        )

    return Response(
        content=stored.model_dump_json(),
        media_type="application/json",
        status_code=status.HTTP_201_CREATED,
        headers={
            "X-Document-ID": str(stored.id),
            "X-Doc-Type": stored.doc_type.value,
            "X-Confidence": f"{stored.confidence:.2f}",
        },
    )
