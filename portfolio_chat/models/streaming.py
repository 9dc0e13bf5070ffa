"""
Streaming event schemas for SSE chat.

Defines event types and payloads for real-time answer streaming.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class StreamEventType(str, Enum):
    """Server-to-client event types for streaming chat."""

    CHUNK = "chunk"
    DONE = "done"
    ERROR = "error"


class StreamEvent(BaseModel):
    """
    Base streaming event model.

    Attributes:
        event: Event type identifier
        data: Event-specific payload
    """

    event: StreamEventType
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def chunk(cls, text: str) -> "StreamEvent":
        return cls(event=StreamEventType.CHUNK, data={"chunk": text})

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(event=StreamEventType.DONE, data={"done": True})

    @classmethod
    def error(cls, message: str) -> "StreamEvent":
        return cls(event=StreamEventType.ERROR, data={"error": True, "message": message})

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON payload sent in the SSE data line."""
        return dict(self.data)
