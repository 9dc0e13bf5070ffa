"""
Record store persistence.

Dependencies: sqlalchemy
System role: Relational storage of embedded chunks
"""

from portfolio_chat.boundary.db.base import Base, TimestampMixin
from portfolio_chat.boundary.db.connection import get_async_engine, get_async_session_factory

__all__ = ["Base", "TimestampMixin", "get_async_engine", "get_async_session_factory"]
