"""
Health check API endpoints.

Routes: GET /health, GET /health/vector-store

Dependencies: portfolio_chat.application
System role: Health check HTTP API
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portfolio_chat.api.deps import get_app_context
from portfolio_chat.application.context import AppContext
from portfolio_chat.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str


class VectorStoreHealthResponse(BaseModel):
    """Vector store health response model."""

    status: str
    seeded: bool
    record_count: int
    search_strategy: str
    ingestion_version: int | None = None


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc).isoformat())


@router.get("/vector-store", response_model=VectorStoreHealthResponse)
async def health_check_vector_store(context: AppContext = Depends(get_app_context)):
    """Vector store health check."""
    store = context.vector_store
    try:
        count = await store.count()
        version = await store.latest_version()
    except StorageError as e:
        logger.error(f"{__name__}:health_check_vector_store - {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "message": "Vector store unreachable"},
        )
    return VectorStoreHealthResponse(
        status="healthy",
        seeded=count > 0,
        record_count=count,
        search_strategy=store.searcher_name,
        ingestion_version=version,
    )
