"""
Unified Exception Hierarchy for Topic Sentiment.

Exception Hierarchy:
    TopicSentimentError (base)
    ├── SourceUnavailableError
    │   ├── NetworkError
    │   ├── RateLimitError
    │   ├── AuthenticationError
    │   └── ParseError
    ├── ValidationError
    │   └── InvalidQueryError
    ├── RankingUnavailableError
    └── ConfigurationError

Source errors never cross the adapter boundary as exceptions; they are
converted into a failed SourceResult there. Only validation and unexpected
errors reach the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = auto()      # Recoverable, can continue
    ERROR = auto()        # Failed but can retry
    CRITICAL = auto()     # Cannot continue
    TRANSIENT = auto()    # Temporary, should retry automatically


class ErrorCategory(Enum):
    """Categories for error classification."""
    SOURCE = "source"
    VALIDATION = "validation"
    RANKING = "ranking"
    CONFIGURATION = "config"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Rich context for error messages."""
    source: str | None = None
    operation: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    retry_after: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class TopicSentimentError(Exception):
    """
    Base exception for all Topic Sentiment errors.

    Provides:
    - Structured error context
    - Severity classification
    - Retry guidance
    """

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.SOURCE,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
            "retryable": self.retryable,
        }
        if self.context.source:
            result["source"] = self.context.source
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        if self.context.retry_after:
            result["retry_after_seconds"] = self.context.retry_after
        return result


# =============================================================================
# Source Errors
# =============================================================================

class SourceUnavailableError(TopicSentimentError):
    """A single source could not produce items (network, auth, parse, rate limit)."""

    def __init__(
        self,
        message: str,
        *,
        source: str = "unknown",
        context: ErrorContext | None = None,
        retryable: bool = True,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = ErrorContext(
            source=source,
            operation=ctx.operation,
            input_value=ctx.input_value,
            suggestion=ctx.suggestion,
            retry_after=ctx.retry_after,
            metadata=ctx.metadata,
        )
        super().__init__(
            f"{source}: {message}",
            context=ctx,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.SOURCE,
            retryable=retryable,
        )
        self.source = source
        self.reason = message


class NetworkError(SourceUnavailableError):
    """Raised for network connectivity issues and timeouts."""

    def __init__(
        self,
        message: str = "Network connection failed",
        *,
        source: str = "unknown",
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, source=source, context=context, retryable=True)


class RateLimitError(SourceUnavailableError):
    """Raised when a source rate limit is exceeded or its circuit is open."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        source: str = "unknown",
        retry_after: float = 1.0,
    ) -> None:
        ctx = ErrorContext(suggestion="Wait and retry the request", retry_after=retry_after)
        super().__init__(message, source=source, context=ctx, retryable=True)
        self.severity = ErrorSeverity.TRANSIENT


class AuthenticationError(SourceUnavailableError):
    """Raised when credentials are missing or rejected."""

    def __init__(
        self,
        message: str = "Authentication failed",
        *,
        source: str = "unknown",
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, source=source, context=context, retryable=False)


class ParseError(SourceUnavailableError):
    """Raised when a source response has an unexpected shape."""

    def __init__(
        self,
        message: str,
        *,
        source: str = "unknown",
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(f"Parse error: {message}", source=source, context=context, retryable=False)


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(TopicSentimentError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.VALIDATION,
            retryable=False,
        )


class InvalidQueryError(ValidationError):
    """Raised when the analysis query is missing or blank."""

    def __init__(
        self,
        query: str | None,
        reason: str = "Query required",
    ) -> None:
        ctx = ErrorContext(
            input_value=query,
            suggestion="Provide a non-empty topic, e.g. 'electric cars'",
        )
        super().__init__(reason, context=ctx)


# =============================================================================
# Ranking / Configuration Errors
# =============================================================================

class RankingUnavailableError(TopicSentimentError):
    """Raised when the embedding model cannot be loaded or cannot encode."""

    def __init__(
        self,
        message: str = "Embedding model unavailable",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.RANKING,
            retryable=True,
        )


class ConfigurationError(TopicSentimentError):
    """Raised for configuration-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            retryable=False,
        )
