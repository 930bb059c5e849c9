"""API routes for search service."""

from typing import Any, List, Optional

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from libs.common.errors import CollaboratorFailure, InvalidModeError, InvalidPaginationError
from ..hybrid.search_manager import SearchManager, validate_mode

logger = structlog.get_logger("search_service.api")

router = APIRouter()

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class DocumentModel(BaseModel):
    """Document model."""
    id: int = Field(..., description="Document ID")
    title: str = Field("", description="Document title")
    url: str = Field("", description="Source URL")
    content: str = Field("", description="Document content")


class SearchResultModel(BaseModel):
    """Search result model."""
    document: DocumentModel = Field(..., description="Matched document")
    score: float = Field(..., description="Relevance score")


class SearchResponseModel(BaseModel):
    """One page of search results."""
    documents: List[SearchResultModel] = Field(..., description="Search results")
    total: int = Field(..., description="Total number of results")
    page: int = Field(..., description="Page number (1-indexed)")
    mode: str = Field(..., description="Search mode used")


class StatusModel(BaseModel):
    """Service status."""
    status: str = Field(..., description="Overall status")
    manticore_healthy: bool = Field(..., description="Document store reachable")
    documents_loaded: int = Field(..., description="Documents available for vector search")
    vectorizer_ready: bool = Field(..., description="Vector search has a corpus to fit")


class APIResponse(BaseModel):
    """Envelope shared by every API response."""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None


def get_search_manager(request: Request) -> Optional[SearchManager]:
    """Get search manager from application state."""
    return getattr(request.app.state, "search_manager", None)


def get_max_page_size(request: Request) -> int:
    config = getattr(request.app.state, "config", None)
    return config.ml_search_max_page_size if config else 100


def success_response(data: Any) -> JSONResponse:
    return JSONResponse(status_code=200, content=APIResponse(success=True, data=data).model_dump())


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse(success=False, error=message).model_dump(exclude_none=True),
    )


def parse_int_param(value: Optional[str], default: int) -> int:
    """Parse an optional integer query parameter, falling back to ``default``."""
    if value is None or value.strip() == "":
        return default
    return int(value)


@router.get("/search")
def search(
    request: Request,
    query: str = Query("", description="Search query"),
    mode: str = Query("", description="basic, fulltext, vector or hybrid"),
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Results per page"),
):
    """Search documents in the requested mode."""
    query = query.strip()
    if not query:
        return error_response(400, "Query parameter is required")

    try:
        search_mode = validate_mode(mode.strip() or "basic")
    except InvalidModeError as e:
        return error_response(400, str(e))

    try:
        page_number = parse_int_param(page, DEFAULT_PAGE)
    except ValueError:
        page_number = 0
    if page_number < 1:
        return error_response(400, "Invalid page parameter")

    max_page_size = get_max_page_size(request)
    try:
        page_size = parse_int_param(limit, DEFAULT_LIMIT)
    except ValueError:
        page_size = 0
    if page_size < 1 or page_size > max_page_size:
        return error_response(
            400, f"Invalid limit parameter (must be between 1 and {max_page_size})"
        )

    search_manager = get_search_manager(request)
    if search_manager is None:
        return error_response(503, "Search service is not available")

    try:
        response = search_manager.search(query, search_mode, page_number, page_size)
    except InvalidPaginationError as e:
        return error_response(400, str(e))
    except CollaboratorFailure as e:
        logger.error("Search error", mode=search_mode.value, error=str(e))
        return error_response(500, f"Search failed: {e}")

    payload = SearchResponseModel.model_validate(response.to_dict())
    return success_response(payload.model_dump())


@router.get("/status")
def status(request: Request):
    """Report document store health and corpus size."""
    search_manager = get_search_manager(request)

    healthy = False
    documents_loaded = 0
    if search_manager is not None:
        healthy = search_manager.health_check()
        if healthy:
            try:
                documents_loaded = len(search_manager.document_store.fetch_corpus())
            except Exception as e:
                logger.warning("Could not count documents", error=str(e))

    payload = StatusModel(
        status="ok",
        manticore_healthy=healthy,
        documents_loaded=documents_loaded,
        vectorizer_ready=documents_loaded > 0,
    )
    return success_response(payload.model_dump())
