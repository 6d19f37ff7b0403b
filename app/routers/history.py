"""
Analysis history API endpoints.

Stored analyses can be listed, fetched by id and deleted. They are never
edited.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from app.config import get_settings
from app.db.documents import (
    NotFoundError,
    PersistenceError,
    delete_document,
    get_document,
    list_documents,
)
from app.db.supabase_client import get_supabase_client
from app.middleware.rate_limit import get_limiter
from app.models.analysis import HistoryItem

router = APIRouter(prefix="/history", tags=["history"])
limiter = get_limiter()
logger = logging.getLogger(__name__)


def _database_error(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Database error: {str(e)}"
    )


@router.get("", response_model=List[HistoryItem])
@limiter.limit(lambda: get_settings().history_rate_limit)  # type: ignore[untyped-decorator]
async def list_history(
    request: Request,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> List[HistoryItem]:
    """
    List stored analyses, newest first.

    Returns:
        200: List of id, filename, doc_type and analyzed_at
        503: Database error
    """
    try:
        return await list_documents(get_supabase_client(), limit=limit, offset=offset)
    except (PersistenceError, ValueError) as e:
        raise _database_error(e)


@router.get("/{document_id}", status_code=status.HTTP_200_OK)
@limiter.limit(lambda: get_settings().history_rate_limit)  # type: ignore[untyped-decorator]
async def get_history_item(request: Request, document_id: int) -> Response:
    """
    Retrieve a full stored analysis by id.

    Returns:
        200: Stored analysis with missing fields, recommendations and
             extracted fields decoded
        404: Analysis not found
        503: Database error
    """
    try:
        stored = await get_document(get_supabase_client(), document_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (PersistenceError, ValueError) as e:
        raise _database_error(e)

    return Response(
        content=stored.model_dump_json(),
        media_type="application/json",
        status_code=status.HTTP_200_OK,
        headers={"X-Doc-Type": stored.doc_type.value},
    )


@router.delete("/{document_id}", status_code=status.HTTP_200_OK)
@limiter.limit(lambda: get_settings().history_rate_limit)  # type: ignore[untyped-decorator]
async def delete_history_item(request: Request, document_id: int) -> Dict[str, Any]:
    """
    Delete a stored analysis.

    Returns:
        200: Row removed
        404: No analysis with this id
        503: Database error
    """
    try:
        removed = await delete_document(get_supabase_client(), document_id)
    except (PersistenceError, ValueError) as e:
        raise _database_error(e)

    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="History item not found."
        )

    logger.info("Deleted analysis %s", document_id)
    return {"message": "History item deleted successfully.", "id": document_id}
