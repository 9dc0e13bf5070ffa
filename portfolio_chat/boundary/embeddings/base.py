"""
Embedding function interface.

Every backend returns unit-length vectors of a fixed dimension. Model calls
are blocking library calls and run in the threadpool.

Dependencies: numpy, fastapi.concurrency
System role: Text-to-vector boundary shared by ingestion and live queries
"""

import logging
from abc import ABC, abstractmethod

import numpy as np
from fastapi.concurrency import run_in_threadpool

from portfolio_chat.core.exceptions import (
    EmbeddingDimensionError,
    EmbeddingError,
)

logger = logging.getLogger(__name__)


class EmbeddingFunction(ABC):
    """
    Base class for embedding backends.

    Subclasses implement _embed_texts; this class handles batching,
    dimension checks and L2 normalization.
    """

    def __init__(self, model_name: str, dimension: int, batch_size: int = 10) -> None:
        """
        Args:
            model_name: Backend model identifier
            dimension: Expected vector length
            batch_size: Texts sent to the backend per call
        """
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._model_name = model_name
        self._dimension = dimension
        self._batch_size = batch_size

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def provider_name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def _embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch synchronously. Called from the threadpool."""

    async def embed(self, text: str) -> list[float]:
        """
        Embed one text.

        Args:
            text: Text to embed

        Returns:
            list[float]: Unit-length vector of length `dimension`

        Raises:
            EmbeddingError: Backend failure or invalid output
        """
        vectors = await self.embed_batch([text])
        return vectors[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Embed many texts, preserving input order.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One unit-length vector per input text

        Raises:
            EmbeddingError: Backend failure or invalid output
        """
        if not texts:
            return []

        vectors: list[list[float]] = []
        for start in range(0, len(texts), self._batch_size):
            batch = texts[start : start + self._batch_size]
            try:
                raw = await run_in_threadpool(self._embed_texts, batch)
            except EmbeddingError:
                raise
            except Exception as e:
                logger.error(
                    f"{__name__}:embed_batch - {self.provider_name} failed: {type(e).__name__}: {e}"
                )
                raise EmbeddingError(
                    f"Embedding backend failed: {type(e).__name__}",
                    backend=self.provider_name,
                    details={"model": self._model_name, "batch_size": len(batch)},
                ) from e

            if len(raw) != len(batch):
                raise EmbeddingError(
                    "Embedding backend returned the wrong number of vectors",
                    backend=self.provider_name,
                    details={"expected": len(batch), "actual": len(raw)},
                )
            vectors.extend(self._normalize(vector) for vector in raw)

        return vectors

    def _normalize(self, vector: list[float]) -> list[float]:
        array = np.asarray(vector, dtype=np.float64)
        if array.ndim != 1 or array.shape[0] != self._dimension:
            raise EmbeddingDimensionError(
                expected=self._dimension,
                actual=int(array.shape[-1]) if array.ndim else 0,
                backend=self.provider_name,
            )
        norm = float(np.linalg.norm(array))
        if norm == 0.0 or not np.isfinite(norm):
            raise EmbeddingError(
                "Embedding backend returned a zero or non-finite vector",
                backend=self.provider_name,
            )
        return (array / norm).tolist()
