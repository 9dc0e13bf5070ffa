"""
Chunking configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Token window sizes used at ingestion
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from portfolio_chat.configs.base import BaseSettings


class ChunkingSettings(BaseSettings):
    """Token chunking configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHUNKING_",
        case_sensitive=False,
        extra="ignore",
    )

    max_tokens: int = Field(default=500, description="Maximum tokens per chunk")
    overlap_tokens: int = Field(default=50, description="Tokens shared by consecutive chunks")
    min_tokens: int = Field(default=100, description="Chunks below this size are dropped unless final")
    encoding_name: str = Field(default="cl100k_base", description="tiktoken encoding name")
