"""
Base CRUD operations for SQLAlchemy models.

Provides generic read and bulk write operations that can be inherited and
extended by model-specific CRUD classes.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_chat.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def get_by_id(self, session: AsyncSession, id: Any) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Returns:
            Model instance if found, None otherwise
        """
        return await session.get(self.model, id)

    async def count(self, session: AsyncSession) -> int:
        """Count records in the table."""
        stmt = select(func.count()).select_from(self.model)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def bulk_create(self, session: AsyncSession, instances: list[ModelT]) -> int:
        """
        Add many instances and flush.

        Returns:
            Number of instances added
        """
        session.add_all(instances)
        await session.flush()
        return len(instances)

    async def delete_all(self, session: AsyncSession) -> int:
        """
        Delete every record in the table.

        Returns:
            Number of rows deleted
        """
        result = await session.execute(delete(self.model))
        return result.rowcount or 0
