"""
Response generation configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Generative backend selection and sampling parameters
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from portfolio_chat.configs.base import BaseSettings


class GenerationSettings(BaseSettings):
    """Generative model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GENERATION_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: Literal["gemini", "template"] = Field(
        default="gemini",
        description="Primary backend; the template backend is always the fallback",
    )
    model_names: list[str] = Field(
        default=["gemini-1.5-flash", "gemini-pro", "models/gemini-pro", "models/gemini-1.5-flash"],
        description="Gemini models tried in order until one streams",
    )
    temperature: float = Field(default=0.7, description="Sampling temperature")
    top_p: float = Field(default=0.95, description="Nucleus sampling mass")
    max_output_tokens: int = Field(default=1024, description="Maximum tokens generated per answer")
    google_api_key: str | None = Field(default=None, description="Gemini API key; unset disables Gemini")
    template_word_delay_seconds: float = Field(
        default=0.02,
        description="Pause between words when streaming a template answer",
    )
