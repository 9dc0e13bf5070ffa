"""
Domain models and API schemas.

Dependencies: pydantic
System role: Shared data contracts between layers
"""

from portfolio_chat.models.chat import ChatMessage, ChatRequest, ChatRole
from portfolio_chat.models.content import (
    Category,
    Chunk,
    Document,
    DocumentMetadata,
    EmbeddedChunk,
    StoredRecord,
)
from portfolio_chat.models.ingestion import IngestionReport
from portfolio_chat.models.safety import (
    ConfidenceCheckResult,
    ConfidenceReason,
    RateLimitResult,
)
from portfolio_chat.models.search import SearchOptions, SearchResult
from portfolio_chat.models.streaming import StreamEvent, StreamEventType

__all__ = [
    "Category",
    "ChatMessage",
    "ChatRequest",
    "ChatRole",
    "Chunk",
    "ConfidenceCheckResult",
    "ConfidenceReason",
    "Document",
    "DocumentMetadata",
    "EmbeddedChunk",
    "IngestionReport",
    "RateLimitResult",
    "SearchOptions",
    "SearchResult",
    "StoredRecord",
    "StreamEvent",
    "StreamEventType",
]
