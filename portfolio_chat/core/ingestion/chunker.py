"""
Token-window chunker.

Splits documents into overlapping windows measured in tokens of the
embedding-side tokenizer. A document that already fits in one window is
returned verbatim as a single chunk.

Dependencies: tiktoken
System role: Second stage of the ingestion pipeline
"""

import logging
from typing import Protocol

import tiktoken
from pydantic import BaseModel, Field, model_validator

from portfolio_chat.core.exceptions import ChunkingConfigError
from portfolio_chat.models.content import Chunk, Document

logger = logging.getLogger(__name__)


class Tokenizer(Protocol):
    """Lossless text tokenizer: the bytes of all tokens concatenate to the UTF-8 text."""

    def encode(self, text: str) -> list[int]: ...

    def decode(self, tokens: list[int]) -> str: ...

    def decode_bytes(self, tokens: list[int]) -> bytes: ...


def _char_aligned(data: bytes, start: int, end: int) -> str:
    """Decode data[start:end] widened so no UTF-8 character is cut."""
    while 0 < start < len(data) and data[start] & 0xC0 == 0x80:
        start -= 1
    while end < len(data) and data[end] & 0xC0 == 0x80:
        end += 1
    return data[start:end].decode("utf-8")


class TiktokenTokenizer:
    """Tokenizer backed by a tiktoken BPE encoding."""

    def __init__(self, encoding_name: str = "cl100k_base") -> None:
        self._encoding_name = encoding_name
        self._encoding: tiktoken.Encoding | None = None

    def _get_encoding(self) -> tiktoken.Encoding:
        if self._encoding is None:
            logger.info(f"{__name__}:_get_encoding - Loading tiktoken encoding {self._encoding_name}")
            self._encoding = tiktoken.get_encoding(self._encoding_name)
        return self._encoding

    def encode(self, text: str) -> list[int]:
        return self._get_encoding().encode(text, disallowed_special=())

    def decode(self, tokens: list[int]) -> str:
        return self._get_encoding().decode(tokens)

    def decode_bytes(self, tokens: list[int]) -> bytes:
        return self._get_encoding().decode_bytes(tokens)


class ChunkingConfig(BaseModel):
    """Window sizes, in tokens."""

    max_tokens: int = Field(default=500)
    overlap_tokens: int = Field(default=50)
    min_tokens: int = Field(default=100)

    @model_validator(mode="after")
    def _check_windows(self) -> "ChunkingConfig":
        if self.max_tokens <= 0:
            raise ChunkingConfigError(
                "max_tokens must be positive", details={"max_tokens": self.max_tokens}
            )
        if self.overlap_tokens < 0:
            raise ChunkingConfigError(
                "overlap_tokens must not be negative",
                details={"overlap_tokens": self.overlap_tokens},
            )
        if self.overlap_tokens >= self.max_tokens:
            raise ChunkingConfigError(
                "overlap_tokens must be smaller than max_tokens",
                details={"overlap_tokens": self.overlap_tokens, "max_tokens": self.max_tokens},
            )
        if self.min_tokens < 0 or self.min_tokens > self.max_tokens:
            raise ChunkingConfigError(
                "min_tokens must be between 0 and max_tokens",
                details={"min_tokens": self.min_tokens, "max_tokens": self.max_tokens},
            )
        return self


class TokenChunker:
    """Split documents into overlapping token windows."""

    def __init__(
        self,
        config: ChunkingConfig | None = None,
        tokenizer: Tokenizer | None = None,
    ) -> None:
        """
        Initialize chunker.

        Args:
            config: Window sizes (defaults 500/50/100)
            tokenizer: Tokenizer used to measure and slice text (tiktoken cl100k_base if None)
        """
        self._config = config or ChunkingConfig()
        self._tokenizer = tokenizer or TiktokenTokenizer()

    @property
    def config(self) -> ChunkingConfig:
        return self._config

    def chunk(self, document: Document) -> list[Chunk]:
        """
        Split one document.

        Windows start every (max_tokens - overlap_tokens) tokens. A window
        shorter than min_tokens is dropped unless it is the final one, so the
        union of kept windows covers every token.

        Args:
            document: Document to split

        Returns:
            list[Chunk]: Chunks in ordinal order with total_siblings filled in
        """
        tokens = self._tokenizer.encode(document.text)
        max_tokens = self._config.max_tokens

        if len(tokens) <= max_tokens:
            return [self._make_chunk(document, 0, document.text, len(tokens))]

        step = max_tokens - self._config.overlap_tokens
        windows: list[tuple[int, int]] = []
        start = 0
        while True:
            end = min(start + max_tokens, len(tokens))
            is_final = end == len(tokens)
            if end - start >= self._config.min_tokens or is_final:
                windows.append((start, end))
            if is_final:
                break
            start += step

        # Byte offset of every token boundary; windows are cut from the text itself
        data = document.text.encode("utf-8")
        offsets = [0]
        for token in tokens:
            offsets.append(offsets[-1] + len(self._tokenizer.decode_bytes([token])))

        chunks = [
            self._make_chunk(
                document, ordinal, _char_aligned(data, offsets[start], offsets[end]), end - start
            )
            for ordinal, (start, end) in enumerate(windows)
        ]
        total = len(chunks)
        chunks = [
            chunk.model_copy(update={"is_partial": total > 1, "total_siblings": total})
            for chunk in chunks
        ]
        logger.debug(
            f"{__name__}:chunk - {document.id}: {len(tokens)} tokens -> {total} chunks"
        )
        return chunks

    def chunk_all(self, documents: list[Document]) -> list[Chunk]:
        """Split every document, preserving document order."""
        chunks: list[Chunk] = []
        for document in documents:
            chunks.extend(self.chunk(document))
        logger.info(f"{__name__}:chunk_all - {len(documents)} documents -> {len(chunks)} chunks")
        return chunks

    @staticmethod
    def _make_chunk(document: Document, ordinal: int, text: str, token_count: int) -> Chunk:
        return Chunk(
            id=Chunk.make_id(document.id, ordinal),
            document_id=document.id,
            ordinal=ordinal,
            text=text,
            token_count=token_count,
            category=document.category,
            title=document.title,
            metadata=document.metadata,
        )
