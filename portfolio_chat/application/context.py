"""
Application context.

Explicit container for process-wide components: the store connection,
embedding model, rate limiter state and the auto-seed flag. Components are
built lazily on first access; tests pass their own instances instead.

Dependencies: portfolio_chat.configs, portfolio_chat.core, portfolio_chat.boundary
System role: Composition root shared by the API and the ingestion CLI
"""

import logging

from portfolio_chat.boundary.embeddings.base import EmbeddingFunction
from portfolio_chat.boundary.embeddings.factory import get_embedding_function
from portfolio_chat.boundary.vdb.vector_store import VectorStore
from portfolio_chat.configs import Settings, get_settings
from portfolio_chat.core.content.extractor import ContentExtractor
from portfolio_chat.core.content.facts import PortfolioFacts
from portfolio_chat.core.generation.base import GenerationBackend
from portfolio_chat.core.generation.generator import ResponseGenerator
from portfolio_chat.core.generation.template_backend import TemplateGenerationBackend
from portfolio_chat.core.ingestion.chunker import (
    ChunkingConfig,
    TiktokenTokenizer,
    TokenChunker,
    Tokenizer,
)
from portfolio_chat.core.ingestion.pipeline import AutoSeeder, IngestionPipeline
from portfolio_chat.core.safety.confidence import ConfidenceGate
from portfolio_chat.core.safety.rate_limiter import SlidingWindowRateLimiter
from portfolio_chat.core.safety.validation import InputValidator

logger = logging.getLogger(__name__)


class AppContext:
    """Container for cached component instances."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        facts: PortfolioFacts | None = None,
        embedding_function: EmbeddingFunction | None = None,
        tokenizer: Tokenizer | None = None,
        vector_store: VectorStore | None = None,
        primary_backend: GenerationBackend | None = None,
        rate_limiter: SlidingWindowRateLimiter | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._facts = facts
        self._embedding_function = embedding_function
        self._tokenizer = tokenizer
        self._vector_store = vector_store
        self._primary_backend = primary_backend
        self._rate_limiter = rate_limiter

        self._pipeline: IngestionPipeline | None = None
        self._auto_seeder: AutoSeeder | None = None
        self._generator: ResponseGenerator | None = None
        self._validator: InputValidator | None = None
        self._confidence_gate: ConfidenceGate | None = None
        self._chat_service = None

    @property
    def embedding_function(self) -> EmbeddingFunction:
        """Get cached embedding function."""
        if self._embedding_function is None:
            self._embedding_function = get_embedding_function(self.settings.embedding)
        return self._embedding_function

    @property
    def vector_store(self) -> VectorStore:
        """Get cached vector store (not yet connected)."""
        if self._vector_store is None:
            self._vector_store = VectorStore(
                db_settings=self.settings.database,
                vector_settings=self.settings.vector_store,
                dimension=self.embedding_function.dimension,
            )
        return self._vector_store

    @property
    def chunker(self) -> TokenChunker:
        chunking = self.settings.chunking
        return TokenChunker(
            config=ChunkingConfig(
                max_tokens=chunking.max_tokens,
                overlap_tokens=chunking.overlap_tokens,
                min_tokens=chunking.min_tokens,
            ),
            tokenizer=self._tokenizer or TiktokenTokenizer(chunking.encoding_name),
        )

    @property
    def pipeline(self) -> IngestionPipeline:
        """Get cached ingestion pipeline."""
        if self._pipeline is None:
            self._pipeline = IngestionPipeline(
                extractor=ContentExtractor(self._facts),
                chunker=self.chunker,
                embedding_function=self.embedding_function,
                vector_store=self.vector_store,
            )
        return self._pipeline

    @property
    def auto_seeder(self) -> AutoSeeder:
        if self._auto_seeder is None:
            self._auto_seeder = AutoSeeder(self.pipeline, self.vector_store)
        return self._auto_seeder

    @property
    def validator(self) -> InputValidator:
        if self._validator is None:
            self._validator = InputValidator(self.settings.safety)
        return self._validator

    @property
    def rate_limiter(self) -> SlidingWindowRateLimiter:
        if self._rate_limiter is None:
            self._rate_limiter = SlidingWindowRateLimiter.from_settings(self.settings.safety)
        return self._rate_limiter

    @property
    def confidence_gate(self) -> ConfidenceGate:
        if self._confidence_gate is None:
            self._confidence_gate = ConfidenceGate.from_settings(self.settings.safety)
        return self._confidence_gate

    @property
    def generator(self) -> ResponseGenerator:
        """Get cached response generator."""
        if self._generator is None:
            generation = self.settings.generation
            primary = self._primary_backend
            if primary is None and generation.backend == "gemini":
                if generation.google_api_key:
                    from portfolio_chat.core.generation.llm_backend import GeminiGenerationBackend

                    primary = GeminiGenerationBackend.from_settings(generation)
                else:
                    logger.warning(
                        f"{__name__}:generator - No Gemini API key configured, answering from templates"
                    )
            self._generator = ResponseGenerator(
                primary=primary,
                fallback=TemplateGenerationBackend(
                    word_delay_seconds=generation.template_word_delay_seconds
                ),
            )
        return self._generator

    @property
    def chat_service(self):
        """Get cached chat service."""
        if self._chat_service is None:
            from portfolio_chat.application.chat_service import ChatService

            self._chat_service = ChatService(self)
        return self._chat_service

    async def startup(self) -> None:
        """Connect the vector store."""
        await self.vector_store.connect()
        logger.info(
            f"{__name__}:startup - Vector store connected (strategy={self.vector_store.searcher_name})"
        )

    async def close(self) -> None:
        """Release the store connection."""
        if self._vector_store is not None:
            await self._vector_store.close()
        logger.info(f"{__name__}:close - Application context closed")
