"""
Test suite for the vector store.

Tests record replacement, ranking, filtering and the FAISS strategy's
fallback to brute force, against in-memory and file-backed SQLite.

System role: Verification of storage and retrieval
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from conftest import make_embedded_chunk, unit
from portfolio_chat.boundary.db.CRUD.record_crud import record_crud
from portfolio_chat.boundary.vdb.searchers import FaissIndexSearcher
from portfolio_chat.boundary.vdb.vector_store import VectorStore
from portfolio_chat.configs.database import DatabaseSettings
from portfolio_chat.configs.vector_store import VectorStoreSettings
from portfolio_chat.core.exceptions import EmbeddingDimensionError, IndexNotFoundError, StorageError
from portfolio_chat.models.content import Category
from portfolio_chat.models.search import SearchOptions


@pytest.fixture
def sample_chunks():
    """Three chunks along distinct directions."""
    return [
        make_embedded_chunk("about-chunk-0", [1.0, 0.0, 0.0], Category.ABOUT),
        make_embedded_chunk("service-1-chunk-0", unit(1.0, 1.0, 0.0), Category.SERVICES),
        make_embedded_chunk("skill-1-chunk-0", [0.0, 0.0, 1.0], Category.SKILLS),
    ]


def _store(tmp_path: Path, backend: str = "faiss", database_url: str | None = None) -> VectorStore:
    return VectorStore(
        db_settings=DatabaseSettings(database_url=database_url or "sqlite+aiosqlite:///:memory:"),
        vector_settings=VectorStoreSettings(search_backend=backend, index_dir=str(tmp_path / "index")),
        dimension=3,
    )


class TestVectorStoreWrites:
    """Record replacement and bookkeeping."""

    async def test_empty_store_should_not_be_seeded(self, vector_store: VectorStore) -> None:
        """Test a fresh store reports no records."""
        # Act / Assert
        assert await vector_store.count() == 0
        assert await vector_store.is_seeded() is False
        assert await vector_store.latest_version() is None

    async def test_upsert_should_store_every_chunk(self, vector_store: VectorStore, sample_chunks) -> None:
        """Test written count and version bookkeeping."""
        # Act
        written = await vector_store.upsert_all(sample_chunks, ingestion_version=100)

        # Assert
        assert written == 3
        assert await vector_store.count() == 3
        assert await vector_store.is_seeded() is True
        assert await vector_store.latest_version() == 100

    async def test_repeated_upsert_should_replace_records(
        self, vector_store: VectorStore, sample_chunks
    ) -> None:
        """Test re-ingesting the same chunks leaves one record per chunk."""
        # Arrange
        await vector_store.upsert_all(sample_chunks, ingestion_version=100)

        # Act
        await vector_store.upsert_all(sample_chunks, ingestion_version=200)

        # Assert
        assert await vector_store.count() == 3
        assert await vector_store.latest_version() == 200

    async def test_get_record_should_return_stored_fields(
        self, vector_store: VectorStore, sample_chunks
    ) -> None:
        """Test a stored record round-trips with its version and timestamps."""
        # Arrange
        await vector_store.upsert_all(sample_chunks, ingestion_version=100)

        # Act
        record = await vector_store.get_record("service-1-chunk-0")
        missing = await vector_store.get_record("nope-chunk-0")

        # Assert
        assert record.category == Category.SERVICES
        assert record.vector == pytest.approx(sample_chunks[1].vector)
        assert record.ingestion_version == 100
        assert record.created_at is not None
        assert missing is None

    async def test_upsert_should_drop_records_missing_from_new_run(
        self, vector_store: VectorStore, sample_chunks
    ) -> None:
        """Test records absent from the new run are removed."""
        # Arrange
        await vector_store.upsert_all(sample_chunks, ingestion_version=100)

        # Act
        await vector_store.upsert_all(sample_chunks[:1], ingestion_version=200)
        results = await vector_store.search([0.0, 0.0, 1.0], SearchOptions(min_score=-1.0))

        # Assert
        assert [r.chunk_id for r in results] == ["about-chunk-0"]

    async def test_wrong_dimension_should_be_rejected(self, vector_store: VectorStore) -> None:
        """Test vectors must match the store dimension."""
        # Arrange
        bad = make_embedded_chunk("bad-chunk-0", [1.0, 0.0])

        # Act / Assert
        with pytest.raises(EmbeddingDimensionError):
            await vector_store.upsert_all([bad], ingestion_version=1)
        with pytest.raises(EmbeddingDimensionError):
            await vector_store.search([1.0, 0.0])
        assert await vector_store.count() == 0


class TestVectorStoreSearch:
    """Ranking and filtering."""

    async def test_stored_vector_should_match_itself_first(
        self, vector_store: VectorStore, sample_chunks
    ) -> None:
        """Test querying with a stored vector returns it with score ~1."""
        # Arrange
        await vector_store.upsert_all(sample_chunks, ingestion_version=1)

        # Act
        results = await vector_store.search(sample_chunks[1].vector)

        # Assert
        assert results[0].chunk_id == "service-1-chunk-0"
        assert results[0].score == pytest.approx(1.0, abs=1e-5)
        assert results[0].category == Category.SERVICES
        assert results[0].metadata.source == "tests#service-1-chunk-0"

    async def test_results_should_be_sorted_and_above_min_score(
        self, vector_store: VectorStore, sample_chunks
    ) -> None:
        """Test descending order and the min_score floor."""
        # Arrange
        await vector_store.upsert_all(sample_chunks, ingestion_version=1)

        # Act
        results = await vector_store.search([1.0, 0.0, 0.0], SearchOptions(max_results=5, min_score=0.3))

        # Assert
        assert [r.chunk_id for r in results] == ["about-chunk-0", "service-1-chunk-0"]
        assert results[0].score >= results[1].score
        assert all(r.score >= 0.3 for r in results)

    async def test_max_results_should_truncate(self, vector_store: VectorStore, sample_chunks) -> None:
        """Test at most max_results are returned."""
        # Arrange
        await vector_store.upsert_all(sample_chunks, ingestion_version=1)

        # Act
        results = await vector_store.search([1.0, 0.0, 0.0], SearchOptions(max_results=1, min_score=-1.0))

        # Assert
        assert len(results) == 1

    async def test_category_filter_should_restrict_results(
        self, vector_store: VectorStore, sample_chunks
    ) -> None:
        """Test only the requested category is returned."""
        # Arrange
        await vector_store.upsert_all(sample_chunks, ingestion_version=1)

        # Act
        results = await vector_store.search(
            [1.0, 0.0, 0.0],
            SearchOptions(min_score=-1.0, category_filter=Category.SKILLS),
        )

        # Assert
        assert [r.chunk_id for r in results] == ["skill-1-chunk-0"]

    async def test_ties_should_keep_insertion_order(self, vector_store: VectorStore) -> None:
        """Test equal scores rank by insertion position."""
        # Arrange
        chunks = [
            make_embedded_chunk("b-chunk-0", [0.0, 1.0, 0.0]),
            make_embedded_chunk("a-chunk-0", [0.0, 1.0, 0.0]),
        ]
        await vector_store.upsert_all(chunks, ingestion_version=1)

        # Act
        results = await vector_store.search([0.0, 1.0, 0.0])

        # Assert
        assert [r.chunk_id for r in results] == ["b-chunk-0", "a-chunk-0"]

    async def test_faiss_and_brute_force_should_agree(self, tmp_path: Path) -> None:
        """Test both strategies return the same ranking and scores."""
        # Arrange
        chunks = [
            make_embedded_chunk(f"doc{i}-chunk-0", unit(1.0, i * 0.3, (i % 3) * 0.5))
            for i in range(12)
        ]
        faiss_store = _store(tmp_path / "faiss", backend="faiss")
        brute_store = _store(tmp_path / "brute", backend="brute_force")
        await faiss_store.connect()
        await brute_store.connect()
        await faiss_store.upsert_all(chunks, ingestion_version=1)
        await brute_store.upsert_all(chunks, ingestion_version=1)
        query = unit(1.0, 1.0, 0.5)

        # Act
        faiss_results = await faiss_store.search(query, SearchOptions(max_results=5, min_score=0.0))
        brute_results = await brute_store.search(query, SearchOptions(max_results=5, min_score=0.0))

        # Assert
        assert faiss_store.searcher_name == "faiss"
        assert brute_store.searcher_name == "brute_force"
        assert [r.chunk_id for r in faiss_results] == [r.chunk_id for r in brute_results]
        assert [r.score for r in faiss_results] == pytest.approx([r.score for r in brute_results])

        await faiss_store.close()
        await brute_store.close()


class TestFaissFallback:
    """FAISS index lifecycle and brute-force fallback."""

    async def test_upsert_should_persist_index_files(
        self, vector_store: VectorStore, sample_chunks, tmp_path: Path
    ) -> None:
        """Test the index and id map are written under index_dir."""
        # Act
        await vector_store.upsert_all(sample_chunks, ingestion_version=1)

        # Assert
        assert (tmp_path / "index" / FaissIndexSearcher.INDEX_FILE).exists()
        assert (tmp_path / "index" / FaissIndexSearcher.IDS_FILE).exists()

    async def test_missing_index_should_fall_back_to_brute_force(
        self, vector_store: VectorStore, sample_chunks
    ) -> None:
        """Test search still answers when the index is unavailable."""
        # Arrange
        await vector_store.upsert_all(sample_chunks, ingestion_version=1)
        vector_store._searcher.search = AsyncMock(side_effect=IndexNotFoundError("FAISS index not found"))

        # Act
        results = await vector_store.search([1.0, 0.0, 0.0])

        # Assert
        assert results[0].chunk_id == "about-chunk-0"
        vector_store._searcher.search.assert_awaited_once()

    async def test_connect_should_rebuild_deleted_index(self, tmp_path: Path, sample_chunks) -> None:
        """Test a restarted store rebuilds a deleted index from its records."""
        # Arrange
        database_url = f"sqlite+aiosqlite:///{tmp_path / 'records.db'}"
        first = _store(tmp_path, database_url=database_url)
        await first.connect()
        await first.upsert_all(sample_chunks, ingestion_version=1)
        await first.close()
        (tmp_path / "index" / FaissIndexSearcher.INDEX_FILE).unlink()

        # Act
        second = _store(tmp_path, database_url=database_url)
        await second.connect()
        results = await second.search([0.0, 0.0, 1.0])

        # Assert
        assert (tmp_path / "index" / FaissIndexSearcher.INDEX_FILE).exists()
        assert results[0].chunk_id == "skill-1-chunk-0"
        await second.close()

    async def test_empty_upsert_should_remove_index(
        self, vector_store: VectorStore, sample_chunks, tmp_path: Path
    ) -> None:
        """Test replacing with nothing clears records and index."""
        # Arrange
        await vector_store.upsert_all(sample_chunks, ingestion_version=1)

        # Act
        await vector_store.upsert_all([], ingestion_version=2)

        # Assert
        assert await vector_store.count() == 0
        assert not (tmp_path / "index" / FaissIndexSearcher.INDEX_FILE).exists()
        assert await vector_store.search([1.0, 0.0, 0.0]) == []

    def test_index_definition_should_describe_vector_field(self, tmp_path: Path) -> None:
        """Test operator-facing index description."""
        # Act
        definition = _store(tmp_path).index_definition()

        # Assert
        assert definition["table"] == "portfolio_embeddings"
        assert definition["fields"][0] == {
            "type": "vector",
            "path": "vector",
            "numDimensions": 3,
            "similarity": "cosine",
        }


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


TOP_ONE = SearchOptions(max_results=1, min_score=0.0)


def _drifted_chunks(query: list[float]) -> tuple[list, list]:
    """
    Twelve chunks, and the same set with doc11 moved onto the query direction.

    doc11 starts opposite the query so it is outside the FAISS candidates
    of a top-1 search (ten of twelve vectors).
    """
    near = [make_embedded_chunk(f"doc{i}-chunk-0", unit(1.0, 0.5 + i * 0.1, 0.2)) for i in range(11)]
    original = near + [make_embedded_chunk("doc11-chunk-0", unit(0.0, -1.0, 0.0))]
    moved = near + [make_embedded_chunk("doc11-chunk-0", query)]
    return original, moved


class TestIndexFreshness:
    """A running store follows re-ingestion done by another process."""

    async def test_reingest_into_shared_index_should_reload(self, tmp_path: Path) -> None:
        """Test the live store picks up an index rebuilt by another store."""
        # Arrange
        database_url = f"sqlite+aiosqlite:///{tmp_path / 'records.db'}"
        query = unit(1.0, 1.0, 0.5)
        original, moved = _drifted_chunks(query)
        live = _store(tmp_path, database_url=database_url)
        await live.connect()
        await live.upsert_all(original, ingestion_version=1)
        await live.search(query, TOP_ONE)

        other = _store(tmp_path, database_url=database_url)
        await other.connect()
        await other.upsert_all(moved, ingestion_version=2)
        await other.close()

        # Act
        results = await live.search(query, TOP_ONE)

        # Assert
        assert results[0].chunk_id == "doc11-chunk-0"
        assert results[0].score == pytest.approx(1.0, abs=1e-5)
        assert live._searcher.version == 2
        await live.close()

    async def test_reingest_elsewhere_should_fall_back_then_rebuild(self, tmp_path: Path) -> None:
        """Test a stale local index is bypassed and rebuilt from the records."""
        # Arrange
        database_url = f"sqlite+aiosqlite:///{tmp_path / 'records.db'}"
        query = unit(1.0, 1.0, 0.5)
        original, moved = _drifted_chunks(query)
        live = _store(tmp_path, database_url=database_url)
        await live.connect()
        await live.upsert_all(original, ingestion_version=1)
        await live.search(query, TOP_ONE)

        offline = _store(tmp_path / "offline", database_url=database_url)
        await offline.connect()
        await offline.upsert_all(moved, ingestion_version=2)
        await offline.close()

        brute = _store(tmp_path / "brute", backend="brute_force", database_url=database_url)
        await brute.connect()
        expected = await brute.search(query, TOP_ONE)
        await brute.close()

        # Act
        first = await live.search(query, TOP_ONE)
        second = await live.search(query, TOP_ONE)

        # Assert
        assert [r.chunk_id for r in first] == [r.chunk_id for r in expected]
        assert first[0].chunk_id == "doc11-chunk-0"
        assert [r.chunk_id for r in second] == [r.chunk_id for r in expected]
        assert [r.score for r in second] == pytest.approx([r.score for r in expected])
        assert live._searcher.version == 2
        await live.close()


class TestConnectionLifecycle:
    """Idle-timeout reconnects and connection-error retries."""

    async def test_idle_store_should_reconnect(self, tmp_path: Path, sample_chunks) -> None:
        """Test the engine is replaced after the idle timeout and data is still readable."""
        # Arrange
        clock = FakeClock()
        store = VectorStore(
            db_settings=DatabaseSettings(
                database_url=f"sqlite+aiosqlite:///{tmp_path / 'records.db'}",
                idle_timeout_seconds=30,
            ),
            vector_settings=VectorStoreSettings(search_backend="brute_force"),
            dimension=3,
            clock=clock,
        )
        await store.connect()
        await store.upsert_all(sample_chunks, ingestion_version=1)
        engine = store._engine

        # Act
        clock.now = 10.0
        assert await store.count() == 3
        same_engine = store._engine
        clock.now = 100.0
        count_after_idle = await store.count()

        # Assert
        assert same_engine is engine
        assert store._engine is not engine
        assert count_after_idle == 3
        await store.close()

    async def test_memory_store_should_not_drop_data_when_idle(self, sample_chunks) -> None:
        """Test an in-memory store keeps its engine across the idle timeout."""
        # Arrange
        clock = FakeClock()
        store = VectorStore(
            db_settings=DatabaseSettings(database_url="sqlite+aiosqlite:///:memory:", idle_timeout_seconds=30),
            vector_settings=VectorStoreSettings(search_backend="brute_force"),
            dimension=3,
            clock=clock,
        )
        await store.connect()
        await store.upsert_all(sample_chunks, ingestion_version=1)
        engine = store._engine

        # Act
        clock.now = 1000.0
        count = await store.count()

        # Assert
        assert store._engine is engine
        assert count == 3
        await store.close()

    async def test_connection_error_should_reset_and_retry(self, tmp_path: Path, sample_chunks) -> None:
        """Test a dropped connection is retried on a fresh engine."""
        # Arrange
        store = _store(tmp_path, database_url=f"sqlite+aiosqlite:///{tmp_path / 'records.db'}")
        await store.connect()
        await store.upsert_all(sample_chunks, ingestion_version=1)
        engine = store._engine
        dropped = OperationalError("SELECT count(*)", {}, Exception("connection lost"))

        # Act
        with patch.object(record_crud, "count", AsyncMock(side_effect=[dropped, 3])) as count:
            result = await store.count()

        # Assert
        assert result == 3
        assert count.await_count == 2
        assert store._engine is not engine
        await store.close()

    async def test_persistent_connection_error_should_raise_storage_error(
        self, tmp_path: Path
    ) -> None:
        """Test exhausted retries surface as StorageError."""
        # Arrange
        store = VectorStore(
            db_settings=DatabaseSettings(
                database_url=f"sqlite+aiosqlite:///{tmp_path / 'records.db'}",
                connect_attempts=2,
            ),
            vector_settings=VectorStoreSettings(search_backend="brute_force"),
            dimension=3,
        )
        await store.connect()
        dropped = OperationalError("SELECT count(*)", {}, Exception("connection lost"))

        # Act / Assert
        with patch.object(record_crud, "count", AsyncMock(side_effect=dropped)) as count:
            with pytest.raises(StorageError):
                await store.count()
        assert count.await_count == 2
        await store.close()
