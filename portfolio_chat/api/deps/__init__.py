"""FastAPI dependencies."""

from portfolio_chat.api.deps.dependencies import get_app_context, get_client_id

__all__ = ["get_app_context", "get_client_id"]
