"""
Chat input validation.

Checks structure, history size, and length and prompt-injection patterns of
the message and every history turn, then sanitizes. Blocked patterns are
matched against the raw text so markup cannot hide them.

Dependencies: pydantic
System role: First safety check of every chat request
"""

import logging
import re
from typing import Any

from pydantic import ValidationError

from portfolio_chat.configs.safety import SafetySettings
from portfolio_chat.core.exceptions import InvalidInputError
from portfolio_chat.models.chat import ChatMessage, ChatRequest

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")
_ANGLE_RE = re.compile(r"[<>]")


def sanitize_message(message: str) -> str:
    """Strip HTML tags and stray angle brackets, then trim."""
    return _ANGLE_RE.sub("", _TAG_RE.sub("", message)).strip()


class InputValidator:
    """Validate and sanitize chat requests."""

    def __init__(self, settings: SafetySettings | None = None) -> None:
        self._settings = settings or SafetySettings()
        self._blocked = [re.compile(p, re.IGNORECASE) for p in self._settings.blocked_patterns]

    def validate(self, payload: Any) -> ChatRequest:
        """
        Validate a raw request payload.

        Args:
            payload: Decoded JSON body

        Returns:
            ChatRequest: Request with sanitized message and history

        Raises:
            InvalidInputError: On any validation failure
        """
        if not isinstance(payload, dict):
            raise InvalidInputError("Request body must be a JSON object", field="body")

        try:
            request = ChatRequest.model_validate(payload)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise InvalidInputError(
                f"Invalid request: {first.get('msg', 'validation failed')}", field=field
            ) from e

        message = request.message
        if not message.strip():
            raise InvalidInputError("Message cannot be empty", field="message")
        self._check_content(message, field="message")

        if len(request.history) > self._settings.max_history_turns:
            raise InvalidInputError(
                "Conversation history too long",
                field="history",
                details={"turns": len(request.history), "max": self._settings.max_history_turns},
            )
        # Prior turns reach the prompt too
        for index, turn in enumerate(request.history):
            self._check_content(turn.content, field="history", details={"turn": index})

        sanitized = sanitize_message(message)
        if not sanitized:
            raise InvalidInputError("Message cannot be empty", field="message")

        return ChatRequest(
            message=sanitized,
            history=[
                ChatMessage(role=turn.role, content=sanitize_message(turn.content))
                for turn in request.history
            ],
        )

    def _check_content(self, text: str, field: str, details: dict | None = None) -> None:
        """Reject text over the length cap or matching a blocked pattern."""
        details = details or {}
        if len(text) > self._settings.max_message_length:
            raise InvalidInputError(
                f"Message cannot exceed {self._settings.max_message_length} characters",
                field=field,
                details={**details, "length": len(text)},
            )
        for pattern in self._blocked:
            if pattern.search(text):
                logger.warning(
                    f"{__name__}:validate - Blocked pattern matched in {field}",
                    extra={"pattern": pattern.pattern},
                )
                raise InvalidInputError("Invalid message content", field=field, details=details)
