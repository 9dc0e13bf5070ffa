"""
Embedding configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Embedding model selection
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from portfolio_chat.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: Literal["local", "google"] = Field(
        default="local",
        description="'local' runs sentence-transformers in-process, 'google' calls Gemini",
    )
    model: str = Field(
        default="BAAI/bge-small-en-v1.5",
        description="Model identifier for the selected provider",
    )
    dimension: int = Field(default=384, description="Expected vector dimension")
    batch_size: int = Field(default=10, description="Texts embedded per batch during ingestion")
    device: str | None = Field(default=None, description="Torch device for the local model")
    google_api_key: str | None = Field(default=None, description="API key for Gemini embeddings")
