"""ORM models."""

from portfolio_chat.boundary.db.models.record_model import StoredRecordModel

__all__ = ["StoredRecordModel"]
