"""
Similarity search strategies.

Two interchangeable strategies rank stored records by cosine similarity:
a brute-force numpy scan over the candidate rows, and a persisted FAISS
inner-product index. Both rescore candidates with the same float32 dot
product and sort by (-score, insertion position), so for the same data they
return the same ranking.

Dependencies: numpy, faiss-cpu, sqlalchemy
System role: Ranking backends of the vector store
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

import faiss
import numpy as np
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_chat.boundary.db.CRUD.record_crud import record_crud
from portfolio_chat.boundary.db.models.record_model import StoredRecordModel
from portfolio_chat.core.exceptions import IndexNotFoundError
from portfolio_chat.models.search import SearchOptions, SearchResult

logger = logging.getLogger(__name__)


def rank_records(
    rows: Sequence[StoredRecordModel],
    query_vector: list[float],
    options: SearchOptions,
) -> list[SearchResult]:
    """
    Score rows against a unit query vector and return the top results.

    Rows must be in insertion order; ties keep that order.
    """
    if not rows:
        return []

    matrix = np.asarray([row.vector for row in rows], dtype=np.float32)
    query = np.asarray(query_vector, dtype=np.float32)
    scores = matrix @ query

    order = sorted(range(len(rows)), key=lambda i: (-float(scores[i]), rows[i].position))
    results: list[SearchResult] = []
    for i in order:
        score = float(scores[i])
        if score < options.min_score:
            break
        row = rows[i]
        results.append(
            SearchResult(
                chunk_id=row.id,
                text=row.text,
                score=score,
                category=row.category,
                title=row.title,
                metadata=row.metadata_model,
            )
        )
        if len(results) >= options.max_results:
            break
    return results


class SimilaritySearcher(ABC):
    """Strategy interface for ranking stored records."""

    name: str = "searcher"

    @abstractmethod
    async def rebuild(self, ids: list[str], vectors: list[list[float]], version: int | None) -> None:
        """Refresh any derived structure after the record table was replaced."""

    @abstractmethod
    async def search(
        self,
        session: AsyncSession,
        query_vector: list[float],
        options: SearchOptions,
    ) -> list[SearchResult]:
        """Return results with score >= options.min_score, best first."""


class BruteForceSearcher(SimilaritySearcher):
    """Score every candidate row in one numpy pass."""

    name = "brute_force"

    async def rebuild(self, ids: list[str], vectors: list[list[float]], version: int | None) -> None:
        return None

    async def search(
        self,
        session: AsyncSession,
        query_vector: list[float],
        options: SearchOptions,
    ) -> list[SearchResult]:
        rows = await record_crud.get_candidates(session, options.category_filter)
        return await run_in_threadpool(rank_records, rows, query_vector, options)


class FaissIndexSearcher(SimilaritySearcher):
    """
    Search a persisted FAISS IndexFlatIP.

    Vectors are unit length, so inner product equals cosine similarity. The
    index and its chunk-id map live under index_dir and are rebuilt whenever
    the record table is replaced. The id map carries the ingestion version
    it was built from; an index whose version differs from the table's is
    reloaded from disk, and reported missing if the disk copy is stale too.
    """

    name = "faiss"
    INDEX_FILE = "portfolio.faiss"
    IDS_FILE = "portfolio.ids.json"
    CANDIDATE_MULTIPLIER = 10

    def __init__(self, index_dir: str | Path, dimension: int) -> None:
        self._index_dir = Path(index_dir)
        self._dimension = dimension
        self._index: faiss.Index | None = None
        self._ids: list[str] = []
        self._version: int | None = None

    @property
    def index_path(self) -> Path:
        return self._index_dir / self.INDEX_FILE

    @property
    def ids_path(self) -> Path:
        return self._index_dir / self.IDS_FILE

    @property
    def version(self) -> int | None:
        """Ingestion version of the loaded index."""
        return self._version

    def exists(self) -> bool:
        return self.index_path.exists() and self.ids_path.exists()

    async def rebuild(self, ids: list[str], vectors: list[list[float]], version: int | None) -> None:
        await run_in_threadpool(self._rebuild_sync, ids, vectors, version)

    def _rebuild_sync(self, ids: list[str], vectors: list[list[float]], version: int | None) -> None:
        self._index_dir.mkdir(parents=True, exist_ok=True)
        if not ids:
            self.index_path.unlink(missing_ok=True)
            self.ids_path.unlink(missing_ok=True)
            self._index = None
            self._ids = []
            self._version = None
            logger.info(f"{__name__}:rebuild - No records, index removed")
            return

        index = faiss.IndexFlatIP(self._dimension)
        index.add(np.asarray(vectors, dtype=np.float32))

        tmp_index = self.index_path.with_suffix(".tmp")
        tmp_ids = self.ids_path.with_suffix(".tmp")
        faiss.write_index(index, str(tmp_index))
        tmp_ids.write_text(json.dumps({"version": version, "ids": ids}), encoding="utf-8")
        os.replace(tmp_index, self.index_path)
        os.replace(tmp_ids, self.ids_path)

        self._index = index
        self._ids = list(ids)
        self._version = version
        logger.info(
            f"{__name__}:rebuild - Index rebuilt with {index.ntotal} vectors "
            f"(version={version}) at {self._index_dir}"
        )

    def _load_sync(self, expected_version: int | None) -> None:
        if self._index is not None and self._version == expected_version:
            return
        self._index = None
        if not self.exists():
            raise IndexNotFoundError(
                "FAISS index not found", operation="search", details={"path": str(self.index_path)}
            )
        index = faiss.read_index(str(self.index_path))
        id_map = json.loads(self.ids_path.read_text(encoding="utf-8"))
        ids = id_map.get("ids", []) if isinstance(id_map, dict) else []
        version = id_map.get("version") if isinstance(id_map, dict) else None
        if index.ntotal != len(ids) or index.d != self._dimension:
            raise IndexNotFoundError(
                "FAISS index does not match its id map",
                operation="search",
                details={"ntotal": index.ntotal, "ids": len(ids), "dimension": index.d},
            )
        if version != expected_version:
            raise IndexNotFoundError(
                "FAISS index is stale relative to the record store",
                operation="search",
                details={"index_version": version, "store_version": expected_version},
            )
        self._index = index
        self._ids = ids
        self._version = version
        logger.info(f"{__name__}:_load - Loaded index with {index.ntotal} vectors (version={version})")

    @staticmethod
    def _query_sync(index: faiss.Index, ids: list[str], query_vector: list[float], k: int) -> list[str]:
        query = np.asarray([query_vector], dtype=np.float32)
        _, positions = index.search(query, k)
        return [ids[p] for p in positions[0] if p >= 0]

    async def search(
        self,
        session: AsyncSession,
        query_vector: list[float],
        options: SearchOptions,
    ) -> list[SearchResult]:
        store_version = await record_crud.latest_version(session)
        if store_version is None:
            return []
        await run_in_threadpool(self._load_sync, store_version)
        index, ids = self._index, self._ids
        total = len(ids)
        if options.category_filter is not None:
            k = total
        else:
            k = min(total, options.max_results * self.CANDIDATE_MULTIPLIER)
        if k == 0:
            return []

        candidate_ids = await run_in_threadpool(self._query_sync, index, ids, query_vector, k)
        rows_by_id = await record_crud.get_by_ids(session, candidate_ids)
        if len(rows_by_id) != len(candidate_ids):
            self._index = None
            raise IndexNotFoundError(
                "FAISS index ids are missing from the record store",
                operation="search",
                details={"candidates": len(candidate_ids), "found": len(rows_by_id)},
            )

        rows = sorted(rows_by_id.values(), key=lambda row: row.position)
        if options.category_filter is not None:
            rows = [row for row in rows if row.category == options.category_filter.value]
        return await run_in_threadpool(rank_records, rows, query_vector, options)
