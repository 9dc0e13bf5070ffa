"""
Local sentence-transformers embeddings.

Runs a BGE model in-process so ingestion and queries need no network once
the model weights are cached.

Dependencies: sentence_transformers
System role: Default embedding backend
"""

import logging

from sentence_transformers import SentenceTransformer

from portfolio_chat.boundary.embeddings.base import EmbeddingFunction

logger = logging.getLogger(__name__)


class SentenceTransformerEmbeddingFunction(EmbeddingFunction):
    """Sentence-transformers embedding backend (mean pooled, normalized)."""

    DEFAULT_MODEL = "BAAI/bge-small-en-v1.5"
    DEFAULT_DIMENSIONS = 384

    def __init__(
        self,
        model_name: str | None = None,
        dimension: int | None = None,
        batch_size: int = 10,
        device: str | None = None,
    ) -> None:
        super().__init__(
            model_name=model_name or self.DEFAULT_MODEL,
            dimension=dimension or self.DEFAULT_DIMENSIONS,
            batch_size=batch_size,
        )
        self._device = device
        self._model: SentenceTransformer | None = None

    @property
    def provider_name(self) -> str:
        return "sentence-transformers"

    def _get_model(self) -> SentenceTransformer:
        """Lazy-load the model on first use."""
        if self._model is None:
            logger.info(
                f"{__name__}:_get_model - Loading {self._model_name} (device={self._device or 'auto'})"
            )
            self._model = SentenceTransformer(self._model_name, device=self._device)
        return self._model

    def _embed_texts(self, texts: list[str]) -> list[list[float]]:
        embeddings = self._get_model().encode(
            texts,
            batch_size=self._batch_size,
            normalize_embeddings=True,
            convert_to_numpy=True,
            show_progress_bar=False,
        )
        return embeddings.tolist()
