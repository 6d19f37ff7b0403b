"""Database functions for stored document analyses.

Each analysis is stored as one row in the documents table and never updated
afterwards: rows are only inserted, read and deleted. List-like columns
(missing fields, recommendations, extracted fields) are kept as JSON.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from app.config import get_settings
from app.models.analysis import AnalysisResult, HistoryItem, StoredAnalysis

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = "id, filename, doc_type, analyzed_at"


class PersistenceError(Exception):
    """Raised when the document store fails to write, read or delete."""


class NotFoundError(Exception):
    """Raised when a stored analysis does not exist."""

    def __init__(self, document_id: int):
        super().__init__(f"Analysis not found: {document_id}")
        self.document_id = document_id


def _table_name(table: Optional[str]) -> str:
    return table or get_settings().documents_table


def _load_json(value: Any, default: Any) -> Any:
    """Decode a JSON column, tolerating rows written as text or left NULL."""
    if value is None:
        return default
    if isinstance(value, str):
        return json.loads(value) if value else default
    return value


def to_record(result: AnalysisResult) -> Dict[str, Any]:
    """Map an AnalysisResult to a row for insertion."""
    return {
        'filename': result.filename,
        'content': result.text,
        'doc_type': result.doc_type.value,
        'confidence': result.confidence,
        'missing_fields': list(result.missing_fields),
        'recommendations': list(result.recommendations),
        'extracted_fields': dict(result.extracted_fields),
    }


def from_record(row: Dict[str, Any]) -> StoredAnalysis:
    """Build a StoredAnalysis from a database row."""
    return StoredAnalysis(
        id=row['id'],
        analyzed_at=row['analyzed_at'],
        filename=row.get('filename') or "",
        text=row.get('content') or "",
        doc_type=row['doc_type'],
        confidence=row['confidence'],
        missing_fields=_load_json(row.get('missing_fields'), []),
        recommendations=_load_json(row.get('recommendations'), []),
        extracted_fields=_load_json(row.get('extracted_fields'), {}),
    )


async def create_document(
    client: Client,
    result: AnalysisResult,
    table: Optional[str] = None
) -> StoredAnalysis:
    """Insert an analysis and return it with its generated id and timestamp.

    Args:
        client: Supabase client instance
        result: Completed analysis
        table: Override for the documents table name

    Returns:
        StoredAnalysis: The stored row

    Raises:
        PersistenceError: If the insert fails or returns no row
    """
    record = to_record(result)
    table_name = _table_name(table)

    try:
        response = await asyncio.to_thread(
            lambda: client.table(table_name).insert(record).execute()
        )
    except Exception as e:
        logger.error("Failed to insert analysis for %s: %s", result.filename, e)
        raise PersistenceError(f"Failed to insert analysis: {str(e)}") from e

    if not response.data:
        raise PersistenceError("Insert returned no data")

    row = response.data[0]
    return StoredAnalysis(
        **result.model_dump(),
        id=row['id'],
        analyzed_at=row['analyzed_at'],
    )


async def get_document(
    client: Client,
    document_id: int,
    table: Optional[str] = None
) -> StoredAnalysis:
    """Retrieve a stored analysis by id.

    Raises:
        NotFoundError: If no row has this id
        PersistenceError: If the query fails
    """
    table_name = _table_name(table)
    try:
        response = await asyncio.to_thread(
            lambda: client.table(table_name).select('*').eq('id', document_id).execute()
        )
    except Exception as e:
        logger.error("Failed to retrieve analysis %s: %s", document_id, e)
        raise PersistenceError(f"Failed to retrieve analysis: {str(e)}") from e

    if not response.data:
        raise NotFoundError(document_id)
    return from_record(response.data[0])


async def list_documents(
    client: Client,
    limit: int = 50,
    offset: int = 0,
    table: Optional[str] = None
) -> List[HistoryItem]:
    """List stored analyses, newest first.

    Args:
        client: Supabase client instance
        limit: Maximum number of records to return
        offset: Number of records to skip

    Raises:
        PersistenceError: If the query fails
    """
    table_name = _table_name(table)
    try:
        response = await asyncio.to_thread(
            lambda: client.table(table_name)
            .select(HISTORY_COLUMNS)
            .order('analyzed_at', desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
    except Exception as e:
        logger.error("Failed to list analyses: %s", e)
        raise PersistenceError(f"Failed to list analyses: {str(e)}") from e

    return [HistoryItem(**row) for row in (response.data or [])]


async def delete_document(
    client: Client,
    document_id: int,
    table: Optional[str] = None
) -> bool:
    """Delete a stored analysis.

    Returns:
        bool: True if a row was removed, False if no row had this id

    Raises:
        PersistenceError: If the delete fails
    """
    table_name = _table_name(table)
    try:
        response = await asyncio.to_thread(
            lambda: client.table(table_name).delete().eq('id', document_id).execute()
        )
    except Exception as e:
        logger.error("Failed to delete analysis %s: %s", document_id, e)
        raise PersistenceError(f"Failed to delete analysis: {str(e)}") from e

    return bool(response.data)
