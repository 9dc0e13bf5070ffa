"""
Response generator.

Streams the answer from the primary backend and falls back to the template
backend when the primary fails before producing text. Every complete stream
ends with a done event; a stream interrupted after text was sent ends with
an error event instead.

Dependencies: portfolio_chat.core.generation
System role: Answer streaming stage of the RAG pipeline
"""

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing

from portfolio_chat.core.exceptions import IncompleteResponseError
from portfolio_chat.core.generation.base import GenerationBackend, GenerationRequest
from portfolio_chat.core.generation.template_backend import TemplateGenerationBackend
from portfolio_chat.core.safety.messages import FallbackType, get_fallback_response
from portfolio_chat.models.chat import ChatMessage
from portfolio_chat.models.search import SearchResult
from portfolio_chat.models.streaming import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)


class ResponseGenerator:
    """Grounded answer streaming with template failover."""

    def __init__(
        self,
        primary: GenerationBackend | None,
        fallback: TemplateGenerationBackend | None = None,
    ) -> None:
        """
        Args:
            primary: Generative backend (None to answer from templates only)
            fallback: Template backend used when the primary cannot start
        """
        self._primary = primary
        self._fallback = fallback or TemplateGenerationBackend()

    async def generate(
        self,
        results: list[SearchResult],
        query: str,
        history: list[ChatMessage] | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Stream answer events for gated results.

        Args:
            results: Results that passed the confidence gate
            query: Sanitized visitor question
            history: Prior turns

        Yields:
            StreamEvent: chunk events, then done (or error if interrupted)
        """
        request = GenerationRequest(question=query, results=results, history=history or [])

        if self._primary is not None:
            emitted = False
            try:
                async with aclosing(self._primary.stream(request)) as pieces:
                    async for text in pieces:
                        emitted = True
                        yield StreamEvent.chunk(text)
            except Exception as e:
                if emitted:
                    logger.error(
                        f"{__name__}:generate - {self._primary.name} interrupted: {type(e).__name__}: {e}"
                    )
                    yield StreamEvent.error(get_fallback_response(FallbackType.ERROR))
                    return
                logger.warning(
                    f"{__name__}:generate - {self._primary.name} unavailable ({type(e).__name__}), "
                    f"falling back to {self._fallback.name}"
                )
            else:
                yield StreamEvent.done()
                return

        async with aclosing(self._fallback.stream(request)) as pieces:
            async for text in pieces:
                yield StreamEvent.chunk(text)
        yield StreamEvent.done()


async def collect_stream(events: AsyncIterator[StreamEvent]) -> str:
    """
    Concatenate a stream into the final answer.

    Raises:
        IncompleteResponseError: When the stream ends without a done event
    """
    parts: list[str] = []
    async for event in events:
        if event.event == StreamEventType.CHUNK:
            parts.append(event.data["chunk"])
        elif event.event == StreamEventType.DONE:
            return "".join(parts)
        elif event.event == StreamEventType.ERROR:
            raise IncompleteResponseError(
                "Response stream ended with an error", details={"received": len(parts)}
            )
    raise IncompleteResponseError(
        "Response stream ended without completion", details={"received": len(parts)}
    )
