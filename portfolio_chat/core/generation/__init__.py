"""
Grounded response generation.
"""

from portfolio_chat.core.generation.base import GenerationBackend, GenerationRequest
from portfolio_chat.core.generation.generator import ResponseGenerator, collect_stream
from portfolio_chat.core.generation.template_backend import TemplateGenerationBackend

__all__ = [
    "GenerationBackend",
    "GenerationRequest",
    "ResponseGenerator",
    "TemplateGenerationBackend",
    "collect_stream",
]
