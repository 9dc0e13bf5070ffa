"""
Google Gemini embeddings with fixed output dimensionality.

Wraps GoogleGenerativeAIEmbeddings so every call requests the configured
dimension.

Dependencies: langchain_google_genai
System role: Hosted embedding backend
"""

import logging

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from portfolio_chat.boundary.embeddings.base import EmbeddingFunction

load_dotenv()

logger = logging.getLogger(__name__)


class GoogleEmbeddingFunction(EmbeddingFunction):
    """Gemini embedding backend."""

    def __init__(
        self,
        model_name: str = "models/gemini-embedding-001",
        dimension: int = 768,
        batch_size: int = 100,
        google_api_key: str | None = None,
    ) -> None:
        super().__init__(model_name=model_name, dimension=dimension, batch_size=batch_size)
        kwargs = {"google_api_key": google_api_key} if google_api_key else {}
        self._embeddings = GoogleGenerativeAIEmbeddings(model=model_name, **kwargs)
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model_name}, "
            f"output_dimensionality={dimension}"
        )

    @property
    def provider_name(self) -> str:
        return "google-genai"

    def _embed_texts(self, texts: list[str]) -> list[list[float]]:
        return self._embeddings.embed_documents(
            texts,
            batch_size=self._batch_size,
            output_dimensionality=self._dimension,
        )
