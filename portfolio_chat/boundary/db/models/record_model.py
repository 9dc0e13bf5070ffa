"""
Stored record ORM model.

One row per embedded chunk. The whole table is replaced on every ingestion
run; `position` keeps insertion order for deterministic tie-breaking.

Dependencies: sqlalchemy
System role: Persistence schema for the vector store
"""

from sqlalchemy import JSON, BigInteger, Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_chat.boundary.db.base import Base, TimestampMixin
from portfolio_chat.models.content import (
    Category,
    DocumentMetadata,
    EmbeddedChunk,
    StoredRecord,
)

TABLE_NAME = "portfolio_embeddings"


class StoredRecordModel(TimestampMixin, Base):
    """ORM model for an embedded chunk."""

    __tablename__ = TABLE_NAME
    __table_args__ = (
        Index("ix_portfolio_embeddings_category", "category"),
        Index("ix_portfolio_embeddings_position", "position"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    document_id: Mapped[str] = mapped_column(String(255), nullable=False)
    ordinal: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    token_count: Mapped[int] = mapped_column(Integer, nullable=False)
    is_partial: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    total_siblings: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    source: Mapped[str] = mapped_column(String(512), nullable=False)
    entities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    vector: Mapped[list[float]] = mapped_column(JSON, nullable=False)
    ingestion_version: Mapped[int] = mapped_column(BigInteger, nullable=False)

    @classmethod
    def from_embedded_chunk(
        cls, chunk: EmbeddedChunk, position: int, ingestion_version: int
    ) -> "StoredRecordModel":
        return cls(
            id=chunk.id,
            position=position,
            document_id=chunk.document_id,
            ordinal=chunk.ordinal,
            category=chunk.category.value,
            title=chunk.title,
            text=chunk.text,
            token_count=chunk.token_count,
            is_partial=chunk.is_partial,
            total_siblings=chunk.total_siblings,
            source=chunk.metadata.source,
            entities=sorted(chunk.metadata.entities),
            keywords=sorted(chunk.metadata.keywords),
            vector=list(chunk.vector),
            ingestion_version=ingestion_version,
        )

    @property
    def metadata_model(self) -> DocumentMetadata:
        return DocumentMetadata(
            source=self.source,
            entities=frozenset(self.entities or []),
            keywords=frozenset(self.keywords or []),
        )

    def to_domain(self) -> StoredRecord:
        return StoredRecord(
            id=self.id,
            document_id=self.document_id,
            ordinal=self.ordinal,
            text=self.text,
            token_count=self.token_count,
            category=Category(self.category),
            title=self.title,
            metadata=self.metadata_model,
            is_partial=self.is_partial,
            total_siblings=self.total_siblings,
            vector=list(self.vector),
            created_at=self.created_at,
            updated_at=self.updated_at,
            ingestion_version=self.ingestion_version,
        )
