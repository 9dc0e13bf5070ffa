"""
Embedding function factory.

Dependencies: portfolio_chat.configs
System role: Select the embedding backend from settings
"""

import logging

from portfolio_chat.boundary.embeddings.base import EmbeddingFunction
from portfolio_chat.configs.embedding import EmbeddingSettings

logger = logging.getLogger(__name__)


def get_embedding_function(settings: EmbeddingSettings) -> EmbeddingFunction:
    """
    Build the configured embedding function.

    Args:
        settings: Embedding settings

    Returns:
        EmbeddingFunction: Local or Google backend
    """
    logger.info(
        f"{__name__}:get_embedding_function - provider={settings.provider}, model={settings.model}"
    )
    if settings.provider == "google":
        from portfolio_chat.boundary.embeddings.google_embedding import GoogleEmbeddingFunction

        return GoogleEmbeddingFunction(
            model_name=settings.model,
            dimension=settings.dimension,
            batch_size=settings.batch_size,
            google_api_key=settings.google_api_key,
        )

    from portfolio_chat.boundary.embeddings.local_embedding import (
        SentenceTransformerEmbeddingFunction,
    )

    return SentenceTransformerEmbeddingFunction(
        model_name=settings.model,
        dimension=settings.dimension,
        batch_size=settings.batch_size,
        device=settings.device,
    )
