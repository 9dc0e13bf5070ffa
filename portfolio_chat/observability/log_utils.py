"""
Structured logging helpers.

Context values attached to log records are flattened to short strings so a
visitor message or a long score list never floods the log.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

MAX_VALUE_LENGTH = 200


def safe_log_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """
    Render a context value for a log record.

    Floats are rounded, short numeric lists are kept, other collections are
    summarized by size, and long strings are truncated.
    """
    if value is None:
        return "None"
    if isinstance(value, float):
        return f"{value:.3f}"
    if isinstance(value, (list, tuple)):
        if len(value) <= 10 and all(isinstance(v, (int, float)) for v in value):
            text = "[" + ", ".join(safe_log_value(v) for v in value) + "]"
        else:
            text = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    else:
        try:
            text = str(value)
        except Exception as e:
            return f"<unrepresentable {type(e).__name__}>"

    if len(text) > max_length:
        return f"{text[:max_length]}... ({len(text)} chars)"
    return text


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    logger.log(level, message, extra={key: safe_log_value(val) for key, val in context.items()})


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """Log an error with its type and traceback; the message text is truncated."""
    extra = {key: safe_log_value(val) for key, val in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(f"{message}: {type(exc).__name__}", extra=extra, exc_info=exc)
