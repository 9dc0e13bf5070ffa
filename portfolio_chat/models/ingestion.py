"""
Ingestion run report.

Dependencies: pydantic
System role: Return type for IngestionPipeline.run()
"""

from pydantic import BaseModel, Field


class IngestionReport(BaseModel):
    """Result of one ingestion run."""

    item_count: int = Field(description="Documents extracted")
    chunk_count: int = Field(description="Chunks produced")
    embedding_count: int = Field(description="Vectors written to the store")
    version: int = Field(description="Ingestion version shared by every written record")
    duration_ms: float = Field(description="Wall-clock duration in milliseconds")
    dry_run: bool = False
