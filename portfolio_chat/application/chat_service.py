"""
Chat use case.

Runs one visitor question through the safety gate, retrieval and answer
generation, in this order: validate, rate-limit, auto-seed, embed, search,
confidence gate, generate.

Dependencies: portfolio_chat.application.context
System role: Orchestration of a single chat request
"""

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from portfolio_chat.models.search import SearchOptions
from portfolio_chat.models.streaming import StreamEvent
from portfolio_chat.observability.log_utils import log_exception_with_context, log_with_context

if TYPE_CHECKING:
    from portfolio_chat.application.context import AppContext

logger = logging.getLogger(__name__)


class PrimedStream:
    """Event stream whose first event was already pulled.

    aclose() closes the underlying generator even when never iterated.
    """

    def __init__(self, first: StreamEvent, events: AsyncGenerator[StreamEvent, None]) -> None:
        self._first: StreamEvent | None = first
        self._events = events

    def __aiter__(self) -> "PrimedStream":
        return self

    async def __anext__(self) -> StreamEvent:
        if self._first is not None:
            first, self._first = self._first, None
            return first
        return await self._events.__anext__()

    async def aclose(self) -> None:
        self._first = None
        await self._events.aclose()


@dataclass
class ChatOutcome:
    """Either a gated canned answer or a primed event stream."""

    stream: PrimedStream | None = None
    message: str | None = None
    confidence: float | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_stream(self) -> bool:
        return self.stream is not None


class ChatService:
    """Answer visitor questions from the stored portfolio content."""

    def __init__(self, context: "AppContext") -> None:
        self._context = context

    async def handle(self, payload: Any, client_id: str) -> ChatOutcome:
        """
        Process one chat request.

        Args:
            payload: Decoded JSON body
            client_id: Rate-limit key of the caller

        Returns:
            ChatOutcome: gated answer or event stream whose first event is ready

        Raises:
            InvalidInputError: Request rejected by validation
            RateLimitedError: Client exceeded a request window
            PortfolioChatException: Embedding, storage or generation failure
        """
        ctx = self._context

        request = ctx.validator.validate(payload)
        rate = ctx.rate_limiter.enforce(client_id)
        headers = rate.headers()
        logger.info(
            f"{__name__}:handle - START message_len={len(request.message)}, history={len(request.history)}"
        )

        try:
            await ctx.auto_seeder.ensure_seeded()
        except Exception as e:
            log_exception_with_context(logger, f"{__name__}:handle - Auto-seed failed", e)

        query_vector = await ctx.embedding_function.embed(request.message)
        vector_settings = ctx.settings.vector_store
        results = await ctx.vector_store.search(
            query_vector,
            SearchOptions(
                max_results=vector_settings.max_results,
                min_score=vector_settings.candidate_min_score,
            ),
        )
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:handle - Retrieved {len(results)} results",
            scores=[round(r.score, 3) for r in results],
        )

        check = ctx.confidence_gate.evaluate(results)
        if not check.passed:
            return ChatOutcome(message=check.message, confidence=check.highest_score, headers=headers)

        events = ctx.generator.generate(check.valid_results, request.message, request.history)
        try:
            first = await events.__anext__()
        except BaseException:
            await events.aclose()
            raise
        return ChatOutcome(stream=PrimedStream(first, events), confidence=check.highest_score, headers=headers)
