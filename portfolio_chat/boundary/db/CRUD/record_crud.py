"""
Stored record CRUD operations.

Dependencies: sqlalchemy
System role: Queries used by the vector store
"""

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_chat.boundary.db.CRUD.base_crud import BaseCRUD
from portfolio_chat.boundary.db.models.record_model import StoredRecordModel
from portfolio_chat.models.content import Category


class RecordCRUD(BaseCRUD[StoredRecordModel]):
    """CRUD operations for StoredRecordModel."""

    def __init__(self) -> None:
        super().__init__(StoredRecordModel)

    async def get_candidates(
        self,
        session: AsyncSession,
        category: Category | None = None,
    ) -> Sequence[StoredRecordModel]:
        """
        Load records in insertion order, optionally restricted to one category.

        Args:
            session: Async database session
            category: Category to keep (all categories if None)
        """
        stmt = select(StoredRecordModel).order_by(StoredRecordModel.position)
        if category is not None:
            stmt = stmt.where(StoredRecordModel.category == category.value)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_ids(
        self,
        session: AsyncSession,
        ids: list[str],
    ) -> dict[str, StoredRecordModel]:
        """Load records keyed by chunk id. Missing ids are absent from the result."""
        if not ids:
            return {}
        stmt = select(StoredRecordModel).where(StoredRecordModel.id.in_(ids))
        result = await session.execute(stmt)
        return {row.id: row for row in result.scalars().all()}

    async def latest_version(self, session: AsyncSession) -> int | None:
        """Highest ingestion version present, or None when the table is empty."""
        result = await session.execute(select(func.max(StoredRecordModel.ingestion_version)))
        return result.scalar_one_or_none()


record_crud = RecordCRUD()
