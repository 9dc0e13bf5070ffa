"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from portfolio_chat.configs.base import BaseSettings
from portfolio_chat.configs.chunking import ChunkingSettings
from portfolio_chat.configs.database import DatabaseSettings
from portfolio_chat.configs.embedding import EmbeddingSettings
from portfolio_chat.configs.generation import GenerationSettings
from portfolio_chat.configs.safety import SafetySettings
from portfolio_chat.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    safety: SafetySettings = Field(default_factory=SafetySettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from portfolio_chat.configs import get_settings
        settings = get_settings()
    """
    return Settings()
