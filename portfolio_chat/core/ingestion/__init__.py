"""
Ingestion: chunking and the offline pipeline.
"""

from portfolio_chat.core.ingestion.chunker import (
    ChunkingConfig,
    TiktokenTokenizer,
    TokenChunker,
    Tokenizer,
)
from portfolio_chat.core.ingestion.pipeline import AutoSeeder, IngestionPipeline

__all__ = [
    "AutoSeeder",
    "ChunkingConfig",
    "IngestionPipeline",
    "TiktokenTokenizer",
    "TokenChunker",
    "Tokenizer",
]
