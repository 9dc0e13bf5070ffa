"""
Safety gate configuration settings.

Input limits, blocked patterns, rate limit windows and the confidence
threshold applied to retrieval results.

Dependencies: pydantic, pydantic_settings
System role: Request admission and answer gating configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from portfolio_chat.configs.base import BaseSettings

DEFAULT_BLOCKED_PATTERNS = [
    r"ignore.*previous.*instructions",
    r"ignore.*system.*prompt",
    r"pretend.*you.*are",
    r"act.*as.*if",
    r"roleplay",
    r"jailbreak",
    r"<script",
    r"javascript:",
]


class SafetySettings(BaseSettings):
    """Safety gate configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SAFETY_",
        case_sensitive=False,
        extra="ignore",
    )

    max_message_length: int = Field(default=2000, description="Maximum characters per message")
    max_history_turns: int = Field(default=20, description="Maximum prior turns accepted")
    blocked_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BLOCKED_PATTERNS),
        description="Case-insensitive regexes rejected as prompt injection",
    )

    requests_per_minute: int = Field(default=20, description="Admitted requests per client per minute")
    requests_per_hour: int = Field(default=100, description="Admitted requests per client per hour")
    max_tracked_clients: int = Field(
        default=10000,
        description="Client request logs kept before the least recently seen is evicted",
    )

    min_confidence: float = Field(default=0.70, description="Score a result needs to ground an answer")
    min_results_required: int = Field(default=1, description="Passing results needed to answer")
    maybe_relevant_threshold: float = Field(
        default=0.5,
        description="Best score above which a refusal is reported as low confidence",
    )
