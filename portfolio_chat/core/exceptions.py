"""
Exception hierarchy for the portfolio chat assistant.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class PortfolioChatException(Exception):
    """Base exception for all portfolio chat errors."""

    code: str = "ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidInputError(PortfolioChatException):
    """Raised when a chat request fails validation."""

    code = "INVALID_INPUT"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class RateLimitedError(PortfolioChatException):
    """Raised when a client exceeds a request window."""

    code = "RATE_LIMITED"

    def __init__(
        self,
        message: str,
        retry_after: int,
        headers: dict[str, str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds until the client may retry
            headers: X-RateLimit-* headers for the response
            details: Additional context
        """
        details = details or {}
        details["retry_after"] = retry_after
        self.retry_after = retry_after
        self.headers = headers or {}
        super().__init__(message, details)


class BackendUnavailableError(PortfolioChatException):
    """Raised when an external model backend cannot serve a request."""

    code = "BACKEND_UNAVAILABLE"

    def __init__(
        self,
        message: str,
        backend: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if backend:
            details["backend"] = backend
        super().__init__(message, details)


class EmbeddingError(BackendUnavailableError):
    """Raised when embedding generation fails."""

    code = "EMBEDDING_FAILED"


class EmbeddingDimensionError(EmbeddingError):
    """Raised when a backend returns a vector of the wrong size."""

    code = "EMBEDDING_DIMENSION"

    def __init__(self, expected: int, actual: int, backend: str | None = None) -> None:
        super().__init__(
            f"Embedding dimension mismatch: expected {expected}, got {actual}",
            backend=backend,
            details={"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class GenerationBackendError(BackendUnavailableError):
    """Raised when a generative backend fails before producing text."""

    code = "GENERATION_FAILED"


class GenerationInterruptedError(GenerationBackendError):
    """Raised when a generative backend fails after text was streamed."""

    code = "GENERATION_INTERRUPTED"


class IncompleteResponseError(PortfolioChatException):
    """Raised when a response stream ends without its terminal sentinel."""

    code = "INCOMPLETE_RESPONSE"


class StorageError(PortfolioChatException):
    """Raised when the record store fails."""

    code = "STORAGE_ERROR"

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize storage error.

        Args:
            message: Error message
            operation: Store operation that failed (connect, search, upsert)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class IndexNotFoundError(StorageError):
    """Raised when the accelerated search index does not exist yet."""

    code = "INDEX_NOT_FOUND"


class ChunkingConfigError(PortfolioChatException):
    """Raised when chunk window sizes are inconsistent."""

    code = "CHUNKING_CONFIG"
