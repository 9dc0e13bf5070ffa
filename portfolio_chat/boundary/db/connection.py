"""
Database connection management.

Builds the async SQLAlchemy engine and session factory for the record store.

Dependencies: sqlalchemy, portfolio_chat.configs
System role: Database connection lifecycle management
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from portfolio_chat.configs.database import DatabaseSettings


def get_async_engine(db_config: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    SQLite in-memory URLs share one connection so every session sees the
    same database; server databases get a checked pool with pre-ping.

    Args:
        db_config: Storage settings

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    url = db_config.database_url
    if db_config.is_sqlite:
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if db_config.is_memory:
            kwargs["poolclass"] = StaticPool
        return create_async_engine(url, echo=db_config.echo_sql, **kwargs)

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory bound to an engine.

    Sessions use autoflush=False and expire_on_commit=False for explicit
    transaction control.

    Usage:
        SessionFactory = get_async_session_factory(engine)
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
