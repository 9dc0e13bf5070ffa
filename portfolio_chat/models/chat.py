"""
Chat domain models and schemas.

Request schemas for the chat endpoint.

Dependencies: pydantic
System role: Chat API contracts
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChatRole(str, Enum):
    """Speaker of a prior turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Single prior turn supplied by the client."""

    model_config = ConfigDict(extra="ignore")

    role: ChatRole = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")


class ChatRequest(BaseModel):
    """Request schema for chat messages."""

    model_config = ConfigDict(extra="ignore")

    message: str = Field(description="Visitor question")
    history: list[ChatMessage] = Field(default_factory=list, description="Prior turns, oldest first")
