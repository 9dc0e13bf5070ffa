"""CRUD operations for the record store."""

from portfolio_chat.boundary.db.CRUD.base_crud import BaseCRUD
from portfolio_chat.boundary.db.CRUD.record_crud import RecordCRUD, record_crud

__all__ = ["BaseCRUD", "RecordCRUD", "record_crud"]
