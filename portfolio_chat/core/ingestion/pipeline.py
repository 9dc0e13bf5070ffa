"""
Ingestion orchestrator.

Extract -> chunk -> embed -> replace the stored records, stamping every
record of a run with one monotonic ingestion version.

Dependencies: portfolio_chat.core, portfolio_chat.boundary
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time

from portfolio_chat.boundary.embeddings.base import EmbeddingFunction
from portfolio_chat.boundary.vdb.vector_store import VectorStore
from portfolio_chat.core.content.extractor import ContentExtractor
from portfolio_chat.core.ingestion.chunker import TokenChunker
from portfolio_chat.models.content import EmbeddedChunk
from portfolio_chat.models.ingestion import IngestionReport

logger = logging.getLogger(__name__)


def new_ingestion_version() -> int:
    """Millisecond wall-clock stamp; later runs get larger versions."""
    return time.time_ns() // 1_000_000


class IngestionPipeline:
    """Orchestrate ingestion: extract -> chunk -> embed -> store."""

    def __init__(
        self,
        extractor: ContentExtractor,
        chunker: TokenChunker,
        embedding_function: EmbeddingFunction,
        vector_store: VectorStore,
    ) -> None:
        self._extractor = extractor
        self._chunker = chunker
        self._embedding_function = embedding_function
        self._vector_store = vector_store

    async def run(self, dry_run: bool = False) -> IngestionReport:
        """
        Run the full pipeline.

        Args:
            dry_run: Extract, chunk and embed but leave the store untouched

        Returns:
            IngestionReport: Counts, version and duration of the run

        Raises:
            EmbeddingError: Embedding backend failure (store left unchanged)
            StorageError: Store write failure
        """
        start = time.perf_counter()
        version = new_ingestion_version()
        logger.info(f"{__name__}:run - START version={version}, dry_run={dry_run}")

        documents = self._extractor.extract()
        logger.info(f"{__name__}:run - Step 1 OK: {len(documents)} documents extracted")

        chunks = self._chunker.chunk_all(documents)
        logger.info(f"{__name__}:run - Step 2 OK: {len(chunks)} chunks")

        vectors = await self._embedding_function.embed_batch([chunk.text for chunk in chunks])
        embedded = [
            EmbeddedChunk(**chunk.model_dump(), vector=vector)
            for chunk, vector in zip(chunks, vectors, strict=True)
        ]
        logger.info(f"{__name__}:run - Step 3 OK: {len(embedded)} embeddings")

        written = 0
        if not dry_run:
            written = await self._vector_store.upsert_all(embedded, ingestion_version=version)
            logger.info(f"{__name__}:run - Step 4 OK: {written} records stored")

        duration_ms = (time.perf_counter() - start) * 1000
        report = IngestionReport(
            item_count=len(documents),
            chunk_count=len(chunks),
            embedding_count=written if not dry_run else len(embedded),
            version=version,
            duration_ms=round(duration_ms, 2),
            dry_run=dry_run,
        )
        logger.info(f"{__name__}:run - COMPLETE in {report.duration_ms}ms")
        return report


class AutoSeeder:
    """
    Seed an empty store once per process.

    Concurrent callers wait on one lock; the first runs ingestion and later
    callers see the store as seeded. A failed attempt leaves the seeder
    unmarked so a later request can retry.
    """

    def __init__(self, pipeline: IngestionPipeline, vector_store: VectorStore) -> None:
        self._pipeline = pipeline
        self._vector_store = vector_store
        self._lock = asyncio.Lock()
        self._done = False
        self.runs = 0

    @property
    def done(self) -> bool:
        return self._done

    async def ensure_seeded(self) -> IngestionReport | None:
        """
        Run ingestion if the store is empty and no earlier attempt succeeded.

        Returns:
            IngestionReport if this call seeded the store, else None
        """
        if self._done:
            return None
        async with self._lock:
            if self._done:
                return None
            if await self._vector_store.is_seeded():
                logger.info(f"{__name__}:ensure_seeded - Store already seeded")
                self._done = True
                return None

            logger.info(f"{__name__}:ensure_seeded - Store empty, running ingestion")
            self.runs += 1
            report = await self._pipeline.run()
            self._done = True
            return report
