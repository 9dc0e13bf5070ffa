"""
Vector search configuration settings.

Chooses the similarity search strategy and the retrieval defaults used by
live queries.

Dependencies: pydantic, pydantic_settings
System role: Retrieval configuration for RAG search
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from portfolio_chat.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Vector search configuration (FAISS index or brute-force scan)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    search_backend: Literal["faiss", "brute_force"] = Field(
        default="faiss",
        description="Preferred search strategy; brute force is always the fallback",
    )
    index_dir: str = Field(
        default=".faiss_index",
        description="Directory holding the persisted FAISS index and id map",
    )
    max_results: int = Field(default=5, description="Number of top results to retrieve")
    candidate_min_score: float = Field(
        default=0.3,
        description="Minimum similarity for a record to be returned as a candidate",
    )
