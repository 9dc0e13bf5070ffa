"""
Dependency injection helpers.

Factory functions for FastAPI dependencies.

Dependencies: fastapi, portfolio_chat.application
System role: DI for the shared application context and client identity
"""

from fastapi import Request

from portfolio_chat.application.context import AppContext


def get_app_context(request: Request) -> AppContext:
    """Return the context created by the application lifespan."""
    return request.app.state.context


def get_client_id(request: Request) -> str:
    """
    Rate-limit key for the caller.

    First X-Forwarded-For entry, then X-Real-IP, then the socket peer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
