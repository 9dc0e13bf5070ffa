"""
Application layer: shared context and the chat use case.
"""

from portfolio_chat.application.chat_service import ChatOutcome, ChatService
from portfolio_chat.application.context import AppContext

__all__ = ["AppContext", "ChatOutcome", "ChatService"]
