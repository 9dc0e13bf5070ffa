"""
Gemini answer backend.

Streams grounded answers from Google Gemini through LangChain, trying each
configured model in order until one produces text.

Dependencies: langchain_google_genai, langchain_core
System role: Primary generative backend
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from typing import Any

from dotenv import load_dotenv
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from portfolio_chat.configs.generation import GenerationSettings
from portfolio_chat.core.exceptions import GenerationBackendError, GenerationInterruptedError
from portfolio_chat.core.generation.base import GenerationBackend, GenerationRequest
from portfolio_chat.core.generation.prompts import build_messages

load_dotenv()

logger = logging.getLogger(__name__)

ModelFactory = Callable[[str], BaseChatModel]


def _chunk_text(content: Any) -> str:
    """Extract text from a streamed chunk (str or list of content blocks)."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return ""


class GeminiGenerationBackend(GenerationBackend):
    """Gemini chat models with ordered model failover."""

    name = "gemini"

    def __init__(
        self,
        model_names: list[str],
        model_factory: ModelFactory,
    ) -> None:
        """
        Args:
            model_names: Models tried in order
            model_factory: Builds a chat model for a model name
        """
        if not model_names:
            raise ValueError("At least one model name is required")
        self._model_names = model_names
        self._model_factory = model_factory

    @classmethod
    def from_settings(cls, settings: GenerationSettings) -> "GeminiGenerationBackend":
        def factory(model_name: str) -> BaseChatModel:
            return ChatGoogleGenerativeAI(
                model=model_name,
                temperature=settings.temperature,
                top_p=settings.top_p,
                max_output_tokens=settings.max_output_tokens,
                google_api_key=settings.google_api_key,
            )

        return cls(model_names=settings.model_names, model_factory=factory)

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        messages = build_messages(request.question, request.results, request.history)
        failures: dict[str, str] = {}

        for model_name in self._model_names:
            emitted = False
            try:
                model = self._model_factory(model_name)
                logger.info(f"{__name__}:stream - Trying model {model_name}")
                async with aclosing(model.astream(messages)) as chunks:
                    async for chunk in chunks:
                        text = _chunk_text(chunk.content)
                        if text:
                            emitted = True
                            yield text
            except Exception as e:
                if emitted:
                    logger.error(
                        f"{__name__}:stream - {model_name} failed mid-stream: {type(e).__name__}: {e}"
                    )
                    raise GenerationInterruptedError(
                        "Generation failed after partial output", backend=self.name,
                        details={"model": model_name},
                    ) from e
                logger.warning(f"{__name__}:stream - {model_name} failed, trying next: {type(e).__name__}")
                failures[model_name] = type(e).__name__
                continue

            if emitted:
                logger.info(f"{__name__}:stream - {model_name} completed")
                return
            logger.warning(f"{__name__}:stream - {model_name} returned no text, trying next")
            failures[model_name] = "empty"

        raise GenerationBackendError(
            "All generative models failed", backend=self.name, details={"failures": failures}
        )
