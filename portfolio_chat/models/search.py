"""
Similarity search schemas.

Dependencies: pydantic
System role: Query options and ranked results of the vector store
"""

from pydantic import BaseModel, Field

from portfolio_chat.models.content import Category, DocumentMetadata


class SearchOptions(BaseModel):
    """Options for one similarity search."""

    max_results: int = Field(default=5, ge=1)
    min_score: float = Field(default=0.3, ge=-1.0, le=1.0)
    category_filter: Category | None = None


class SearchResult(BaseModel):
    """One ranked hit. Never persisted."""

    chunk_id: str
    text: str
    score: float = Field(description="Cosine similarity in [-1, 1]")
    category: Category
    title: str
    metadata: DocumentMetadata
