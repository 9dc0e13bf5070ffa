"""
Content domain models.

A Document is one self-contained fact extracted from the site data. Documents
are split into Chunks, embedded into EmbeddedChunks and persisted as
StoredRecords.

Dependencies: pydantic
System role: Data contracts for the ingestion pipeline and vector store
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Kind of portfolio fact a document describes."""

    ABOUT = "about"
    EXPERIENCE = "experience"
    SERVICES = "services"
    PROJECTS = "projects"
    SKILLS = "skills"
    TESTIMONIALS = "testimonials"
    CONTACT = "contact"
    FAQ = "faq"


class DocumentMetadata(BaseModel):
    """Provenance and lookup hints attached to a document."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(description="Location of the fact in the site data")
    entities: frozenset[str] = Field(default_factory=frozenset)
    keywords: frozenset[str] = Field(default_factory=frozenset)


class Document(BaseModel):
    """Immutable unit of extracted content."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable identifier, identical across ingestion runs")
    category: Category
    title: str
    text: str
    metadata: DocumentMetadata


class Chunk(BaseModel):
    """Token window of a document that fits the embedding model."""

    id: str = Field(description="'{document_id}-chunk-{ordinal}'")
    document_id: str
    ordinal: int = Field(ge=0)
    text: str
    token_count: int = Field(ge=0)
    category: Category
    title: str
    metadata: DocumentMetadata
    is_partial: bool = False
    total_siblings: int = Field(default=1, ge=1)

    @staticmethod
    def make_id(document_id: str, ordinal: int) -> str:
        return f"{document_id}-chunk-{ordinal}"


class EmbeddedChunk(Chunk):
    """Chunk paired with its unit-length embedding."""

    vector: list[float]


class StoredRecord(EmbeddedChunk):
    """Embedded chunk as persisted by the vector store."""

    created_at: datetime
    updated_at: datetime
    ingestion_version: int
