"""
OpenDataLoader plain-text extraction service.

This module turns an uploaded PDF into plain text using OpenDataLoader's local
converter. The text is the only input the analysis pipeline needs; any failure
here aborts the analyze request.
"""

import asyncio
import logging
import os
import tempfile

from opendataloader_pdf import convert

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """Raised when text cannot be extracted from a PDF."""

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        self.original_exception = original_exception


def extract_pdf_text(file_path: str) -> str:
    """
    Extract plain text from a PDF file using OpenDataLoader.

    Args:
        file_path: Path to the PDF file to process

    Returns:
        Raw extracted text (not normalized). May be empty for PDFs without
        a text layer.

    Raises:
        ExtractionError: If the file does not exist, conversion fails or
            the converter produces no text output
    """
    if not os.path.exists(file_path):
        raise ExtractionError(f"PDF file not found: {file_path}")

    with tempfile.TemporaryDirectory() as temp_dir:
        try:
            convert(
                input_path=file_path,
                output_dir=temp_dir,
                format="text",
                quiet=True
            )
        except Exception as e:
            raise ExtractionError(
                f"Failed to extract text from {os.path.basename(file_path)}: {str(e)}",
                original_exception=e,
            ) from e

        base_name = os.path.splitext(os.path.basename(file_path))[0]
        text_path = os.path.join(temp_dir, f"{base_name}.txt")
        if not os.path.exists(text_path):
            raise ExtractionError(
                f"OpenDataLoader produced no text output for {os.path.basename(file_path)}"
            )

        with open(text_path, 'r', encoding='utf-8') as f:
            text = f.read()

    logger.debug("Extracted %d characters from %s", len(text), file_path)
    return text


async def extract_text_from_bytes(content: bytes) -> str:
    """
    Write PDF bytes to a temporary file and extract its text off the event loop.

    Args:
        content: Raw PDF bytes from the upload

    Returns:
        Raw extracted text

    Raises:
        ExtractionError: If extraction fails for any reason
    """
    tmp = tempfile.NamedTemporaryFile(
        prefix="doc_analysis_", delete=False, suffix=".pdf"
    )
    temp_file_path = tmp.name

    try:
        with tmp:
            tmp.write(content)
        return await asyncio.to_thread(extract_pdf_text, temp_file_path)
    finally:
        try:
            os.remove(temp_file_path)
        except OSError as e:
            logger.warning(
                "Failed to remove temp file %s: %s",
                temp_file_path,
                e,
                exc_info=True,
            )
