"""
Generation backend interface.

Dependencies: pydantic
System role: Contract shared by the generative and template backends
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from pydantic import BaseModel, Field

from portfolio_chat.models.chat import ChatMessage
from portfolio_chat.models.search import SearchResult


class GenerationRequest(BaseModel):
    """Everything a backend may use to answer."""

    question: str
    results: list[SearchResult]
    history: list[ChatMessage] = Field(default_factory=list)


class GenerationBackend(ABC):
    """Streams answer text for a grounded request."""

    name: str = "backend"

    @abstractmethod
    def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """
        Yield answer text fragments in order.

        Raises:
            GenerationBackendError: Backend failed before yielding anything
            GenerationInterruptedError: Backend failed after yielding text
        """
