"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
Every concern reads its own environment prefix and falls back to defaults
that reproduce the production site.
"""

from portfolio_chat.configs.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
