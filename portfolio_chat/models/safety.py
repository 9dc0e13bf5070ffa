"""
Safety gate result models.

Dependencies: pydantic
System role: Outcomes of rate limiting and confidence gating
"""

from enum import Enum

from pydantic import BaseModel, Field

from portfolio_chat.models.search import SearchResult


class RateLimitResult(BaseModel):
    """Admission decision for one request."""

    allowed: bool
    limit: int = Field(description="Cap of the tightest window")
    remaining: int = Field(ge=0)
    reset_at: float = Field(description="Epoch seconds when the tightest window frees a slot")
    retry_after: int | None = Field(default=None, description="Seconds to wait when rejected")

    def headers(self) -> dict[str, str]:
        """X-RateLimit-* response headers."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset_at)),
        }
        if self.retry_after is not None:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class ConfidenceReason(str, Enum):
    """Why a result set was refused."""

    NO_RESULTS = "no_results"
    LOW_CONFIDENCE = "low_confidence"
    BELOW_THRESHOLD = "below_threshold"


class ConfidenceCheckResult(BaseModel):
    """Outcome of confidence gating."""

    passed: bool
    reason: ConfidenceReason | None = None
    valid_results: list[SearchResult] = Field(default_factory=list)
    highest_score: float = 0.0
    message: str | None = Field(default=None, description="Canned answer when refused")
