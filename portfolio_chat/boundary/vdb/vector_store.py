"""
Vector store over the record table.

Persists embedded chunks through async SQLAlchemy and ranks them with a
similarity search strategy chosen at connect time. The FAISS strategy falls
back to brute force whenever its index is missing or stale. The engine is
created lazily, reconnected after an idle timeout and retried on connection
failures.

Dependencies: sqlalchemy, tenacity, portfolio_chat.boundary.vdb.searchers
System role: Storage and retrieval collaborator of the RAG pipeline
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from portfolio_chat.boundary.db.base import Base
from portfolio_chat.boundary.db.connection import get_async_engine, get_async_session_factory
from portfolio_chat.boundary.db.CRUD.record_crud import record_crud
from portfolio_chat.boundary.db.models.record_model import TABLE_NAME, StoredRecordModel
from portfolio_chat.boundary.vdb.searchers import (
    BruteForceSearcher,
    FaissIndexSearcher,
    SimilaritySearcher,
)
from portfolio_chat.configs.database import DatabaseSettings
from portfolio_chat.configs.vector_store import VectorStoreSettings
from portfolio_chat.core.exceptions import (
    EmbeddingDimensionError,
    IndexNotFoundError,
    StorageError,
)
from portfolio_chat.models.content import EmbeddedChunk, StoredRecord
from portfolio_chat.models.search import SearchOptions, SearchResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VectorStore:
    """
    Record store with pluggable similarity search.

    Usage:
        store = VectorStore(db_settings, vector_settings, dimension=384)
        await store.connect()
        await store.upsert_all(chunks, ingestion_version=version)
        results = await store.search(query_vector, SearchOptions(max_results=5))
        await store.close()
    """

    def __init__(
        self,
        db_settings: DatabaseSettings,
        vector_settings: VectorStoreSettings,
        dimension: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            db_settings: Connection settings of the record table
            vector_settings: Search strategy and retrieval defaults
            dimension: Vector dimension every record must have
            clock: Monotonic clock used for the idle timeout
        """
        self._db_settings = db_settings
        self._vector_settings = vector_settings
        self._dimension = dimension
        self._clock = clock

        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker | None = None
        self._last_used = 0.0
        self._connect_lock = asyncio.Lock()

        self._fallback = BruteForceSearcher()
        self._searcher: SimilaritySearcher = self._fallback

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def searcher_name(self) -> str:
        return self._searcher.name

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> None:
        """
        Open the engine, create the table and select the search strategy.

        Raises:
            StorageError: When the database cannot be reached
        """
        async with self._connect_lock:
            await self._connect_locked()
        await self._hydrate_index()

    async def _hydrate_index(self, force: bool = False) -> None:
        """Rebuild the FAISS index from the table when it is missing, or always when forced."""
        searcher = self._searcher
        if not isinstance(searcher, FaissIndexSearcher) or (searcher.exists() and not force):
            return
        rows = await self._run("hydrate_index", record_crud.get_candidates)
        if rows or force:
            logger.info(f"{__name__}:_hydrate_index - Rebuilding index from {len(rows)} records")
            version = max((row.ingestion_version for row in rows), default=None)
            await self._rebuild_index([row.id for row in rows], [list(row.vector) for row in rows], version)

    async def _connect_locked(self) -> None:
        if self._engine is not None:
            return

        logger.info(f"{__name__}:connect - Connecting to {self._safe_url()}")
        engine = get_async_engine(self._db_settings)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            await engine.dispose()
            raise StorageError(
                f"Could not connect to record store: {type(e).__name__}", operation="connect"
            ) from e

        self._engine = engine
        self._session_factory = get_async_session_factory(engine)
        self._last_used = self._clock()
        self._searcher = self._select_searcher()
        logger.info(f"{__name__}:connect - Connected, search strategy={self._searcher.name}")

    def _select_searcher(self) -> SimilaritySearcher:
        if self._vector_settings.search_backend == "faiss":
            return FaissIndexSearcher(self._vector_settings.index_dir, self._dimension)
        return self._fallback

    async def close(self) -> None:
        """Dispose the engine. The next operation reconnects."""
        async with self._connect_lock:
            if self._engine is not None:
                await self._engine.dispose()
                logger.info(f"{__name__}:close - Engine disposed")
            self._engine = None
            self._session_factory = None

    async def _ensure_connected(self) -> None:
        idle_timeout = self._db_settings.idle_timeout_seconds
        async with self._connect_lock:
            if (
                self._engine is not None
                and idle_timeout > 0
                and not self._db_settings.is_memory
                and self._clock() - self._last_used > idle_timeout
            ):
                logger.info(f"{__name__}:_ensure_connected - Idle for over {idle_timeout}s, reconnecting")
                await self._engine.dispose()
                self._engine = None
                self._session_factory = None
            await self._connect_locked()
            self._last_used = self._clock()

    async def _reset(self) -> None:
        async with self._connect_lock:
            if self._engine is not None:
                await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    async def _run(self, operation: str, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Run work in a fresh transaction, reconnecting on connection errors."""
        attempts = max(1, self._db_settings.connect_attempts)
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type((OperationalError, DBAPIError)),
                stop=stop_after_attempt(attempts),
                wait=wait_exponential_jitter(initial=0.1, max=2, jitter=0.1),
                before_sleep=lambda retry_state: logger.warning(
                    f"{__name__}:{operation} - Retry {retry_state.attempt_number}/{attempts} after connection error"
                ),
                reraise=True,
            ):
                with attempt:
                    await self._ensure_connected()
                    try:
                        async with self._session_factory() as session:
                            async with session.begin():
                                return await work(session)
                    except (OperationalError, DBAPIError):
                        await self._reset()
                        raise
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:{operation} - FAILED: {type(e).__name__}: {e}")
            raise StorageError(
                f"Record store {operation} failed: {type(e).__name__}", operation=operation
            ) from e
        raise StorageError(f"Record store {operation} failed", operation=operation)

    async def upsert_all(self, chunks: list[EmbeddedChunk], ingestion_version: int) -> int:
        """
        Replace every stored record with the given chunks in one transaction.

        Args:
            chunks: Embedded chunks in the order they should be stored
            ingestion_version: Version stamped on every written record

        Returns:
            int: Number of records written

        Raises:
            EmbeddingDimensionError: When a vector has the wrong length
            StorageError: When the write fails
        """
        for chunk in chunks:
            if len(chunk.vector) != self._dimension:
                raise EmbeddingDimensionError(expected=self._dimension, actual=len(chunk.vector))

        async def replace(session: AsyncSession) -> int:
            deleted = await record_crud.delete_all(session)
            models = [
                StoredRecordModel.from_embedded_chunk(chunk, position, ingestion_version)
                for position, chunk in enumerate(chunks)
            ]
            written = await record_crud.bulk_create(session, models)
            logger.info(
                f"{__name__}:upsert_all - Replaced {deleted} records with {written} (version={ingestion_version})"
            )
            return written

        written = await self._run("upsert_all", replace)
        await self._rebuild_index(
            [chunk.id for chunk in chunks], [chunk.vector for chunk in chunks], ingestion_version
        )
        return written

    async def _rebuild_index(self, ids: list[str], vectors: list[list[float]], version: int | None) -> None:
        try:
            await self._searcher.rebuild(ids, vectors, version)
        except Exception as e:
            # Search keeps working through the brute-force fallback.
            logger.error(f"{__name__}:_rebuild_index - FAILED: {type(e).__name__}: {e}")

    async def count(self) -> int:
        """Number of stored records."""
        return await self._run("count", record_crud.count)

    async def is_seeded(self) -> bool:
        """Whether any record has been stored."""
        return await self.count() > 0

    async def latest_version(self) -> int | None:
        """Ingestion version of the stored records, None when empty."""
        return await self._run("latest_version", record_crud.latest_version)

    async def get_record(self, chunk_id: str) -> StoredRecord | None:
        """Stored record for a chunk id, None when absent."""

        async def load(session: AsyncSession) -> StoredRecord | None:
            row = await record_crud.get_by_id(session, chunk_id)
            return row.to_domain() if row is not None else None

        return await self._run("get_record", load)

    async def search(
        self,
        query_vector: list[float],
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """
        Rank stored records against a unit query vector.

        Args:
            query_vector: Query embedding of the store's dimension
            options: Result count, score floor and category filter

        Returns:
            list[SearchResult]: Results with score >= min_score, best first

        Raises:
            EmbeddingDimensionError: When the query has the wrong length
            StorageError: When the store cannot be read
        """
        if len(query_vector) != self._dimension:
            raise EmbeddingDimensionError(expected=self._dimension, actual=len(query_vector))
        options = options or SearchOptions(
            max_results=self._vector_settings.max_results,
            min_score=self._vector_settings.candidate_min_score,
        )

        stale = False

        async def ranked(session: AsyncSession) -> list[SearchResult]:
            nonlocal stale
            if self._searcher is self._fallback:
                return await self._fallback.search(session, query_vector, options)
            try:
                return await self._searcher.search(session, query_vector, options)
            except IndexNotFoundError as e:
                logger.warning(
                    f"{__name__}:search - {self._searcher.name} unavailable ({e.message}), "
                    f"falling back to {self._fallback.name}"
                )
                stale = True
                return await self._fallback.search(session, query_vector, options)

        results = await self._run("search", ranked)
        if stale:
            await self._hydrate_index(force=True)
        logger.info(
            f"{__name__}:search - {len(results)} results "
            f"(category={options.category_filter.value if options.category_filter else 'any'})"
        )
        return results

    def index_definition(self) -> dict[str, Any]:
        """Description of the vector index for operators."""
        return {
            "table": TABLE_NAME,
            "strategy": self._vector_settings.search_backend,
            "index_dir": self._vector_settings.index_dir,
            "fields": [
                {
                    "type": "vector",
                    "path": "vector",
                    "numDimensions": self._dimension,
                    "similarity": "cosine",
                },
                {"type": "filter", "path": "category"},
            ],
        }

    def _safe_url(self) -> str:
        url = self._db_settings.database_url
        if "@" in url:
            scheme, _, rest = url.partition("://")
            return f"{scheme}://***@{rest.split('@', 1)[1]}"
        return url
