"""
Observability: logging configuration, correlation ids and request middleware.
"""

from portfolio_chat.observability.logger import configure_logging

__all__ = ["configure_logging"]
