"""
File validation service for PDF uploads.

Provides security checks including:
- File size limits
- MIME type validation
- Filename sanitization
"""

import re
from pathlib import Path
from typing import Optional, Tuple

import magic
from fastapi import HTTPException, UploadFile

from app.config import get_settings

ALLOWED_MIME_TYPE = "application/pdf"


async def validate_pdf(
    file: UploadFile,
    max_size: Optional[int] = None,
) -> Tuple[bytes, str]:
    """
    Validate uploaded PDF file and return content and sanitized filename.

    Args:
        file: FastAPI UploadFile instance from multipart/form-data
        max_size: Size limit in bytes; defaults to MAX_UPLOAD_MB from settings

    Returns:
        Tuple of (file_content, sanitized_filename)

    Raises:
        HTTPException: 400 for validation errors, 413 for file too large
    """
    if max_size is None:
        max_size = get_settings().max_upload_bytes

    content = await file.read()

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    if len(content) > max_size:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {max_size // (1024 * 1024)}MB"
        )

    # Validate MIME type using python-magic
    mime_type = magic.from_buffer(content, mime=True)
    if mime_type != ALLOWED_MIME_TYPE:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type. Expected {ALLOWED_MIME_TYPE}, got {mime_type}"
        )

    sanitized_filename = sanitize_filename(file.filename or "upload.pdf")
    return content, sanitized_filename


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent path traversal attacks.

    Args:
        filename: Original filename from upload

    Returns:
        Sanitized filename safe for storage and display

    Security:
        - Strips directory components and parent references (..)
        - Removes null bytes
        - Limits to alphanumeric, dash, underscore, dot
        - Ensures .pdf extension, max 255 chars
    """
    filename = Path(filename.replace("\\", "/")).name
    filename = filename.replace("..", "").replace("\0", "")
    filename = re.sub(r'[^a-zA-Z0-9._-]', '_', filename)

    if not filename or filename == ".pdf":
        filename = "upload.pdf"

    if not filename.lower().endswith('.pdf'):
        filename = filename + '.pdf'

    if len(filename) > 255:
        filename = filename[:-4][:250] + '.pdf'

    return filename
