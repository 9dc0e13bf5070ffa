"""
Safety gate: input validation, rate limiting and confidence gating.
"""

from portfolio_chat.core.safety.confidence import ConfidenceGate
from portfolio_chat.core.safety.rate_limiter import RateWindow, SlidingWindowRateLimiter
from portfolio_chat.core.safety.validation import InputValidator, sanitize_message

__all__ = [
    "ConfidenceGate",
    "InputValidator",
    "RateWindow",
    "SlidingWindowRateLimiter",
    "sanitize_message",
]
