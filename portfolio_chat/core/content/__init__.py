"""
Portfolio content extraction.

Dependencies: pydantic
System role: Source of the documents the assistant may answer from
"""

from portfolio_chat.core.content.extractor import ContentExtractor
from portfolio_chat.core.content.facts import DEFAULT_FACTS, PortfolioFacts

__all__ = ["ContentExtractor", "DEFAULT_FACTS", "PortfolioFacts"]
