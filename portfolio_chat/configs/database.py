"""
Record storage configuration settings.

Manages the SQLAlchemy connection string and pool behaviour for the table
that holds embedded chunks.

Dependencies: pydantic, pydantic_settings
System role: Storage connection configuration for the vector store
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from portfolio_chat.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Record storage configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./portfolio_chat.db",
        description="Async SQLAlchemy URL of the record store",
    )
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    pool_size: int = Field(default=5, description="Connection pool size (server databases only)")
    max_overflow: int = Field(default=10, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")

    idle_timeout_seconds: float = Field(
        default=300.0,
        description="Dispose the engine after this many idle seconds; 0 disables",
    )
    connect_attempts: int = Field(
        default=3,
        description="Attempts made to (re)connect before a storage error surfaces",
    )

    @property
    def is_memory(self) -> bool:
        """Whether the URL is an in-memory SQLite database (lost on dispose)."""
        return self.is_sqlite and (":memory:" in self.database_url or self.database_url.endswith("://"))

    @property
    def is_sqlite(self) -> bool:
        """Whether the URL points at SQLite (no server-side pooling)."""
        return self.database_url.startswith("sqlite")
