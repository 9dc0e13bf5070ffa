"""Embedding backends."""

from portfolio_chat.boundary.embeddings.base import EmbeddingFunction
from portfolio_chat.boundary.embeddings.factory import get_embedding_function

__all__ = ["EmbeddingFunction", "get_embedding_function"]
