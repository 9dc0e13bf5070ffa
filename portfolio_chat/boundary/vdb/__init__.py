"""
Vector storage and similarity search.

Dependencies: sqlalchemy, faiss-cpu, numpy
System role: Retrieval boundary
"""

from portfolio_chat.boundary.vdb.searchers import (
    BruteForceSearcher,
    FaissIndexSearcher,
    SimilaritySearcher,
)
from portfolio_chat.boundary.vdb.vector_store import VectorStore

__all__ = ["BruteForceSearcher", "FaissIndexSearcher", "SimilaritySearcher", "VectorStore"]
