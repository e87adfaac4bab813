"""
Shared kernel for Topic Sentiment.

Provides:
- Unified exception hierarchy
- Async utilities for concurrent source calls
- Environment-driven settings
"""

from .async_utils import (
    # Fault tolerance
    CircuitBreaker,
    # Parallel execution
    gather_with_errors,
)
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InvalidQueryError,
    NetworkError,
    ParseError,
    RankingUnavailableError,
    RateLimitError,
    SourceUnavailableError,
    TopicSentimentError,
    ValidationError,
)
from .settings import Settings

__all__ = [
    # Exceptions
    "TopicSentimentError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "SourceUnavailableError",
    "NetworkError",
    "RateLimitError",
    "AuthenticationError",
    "ParseError",
    "ValidationError",
    "InvalidQueryError",
    "RankingUnavailableError",
    "ConfigurationError",
    # Async utilities
    "gather_with_errors",
    "CircuitBreaker",
    # Settings
    "Settings",
]
