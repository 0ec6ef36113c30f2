"""
Core module for Media Hunter.

Provides:
- Unified exception hierarchy
- Async utilities for concurrent provider calls
"""

from .async_utils import (
    # Fault tolerance
    CircuitBreaker,
    # Parallel execution
    gather_with_errors,
)
from .exceptions import (
    # Configuration errors
    ConfigurationError,
    ErrorContext,
    ErrorSeverity,
    InvalidParameterError,
    InvalidQueryError,
    # Base
    MediaHunterError,
    NetworkError,
    ParseError,
    # Provider errors
    ProviderError,
    RateLimitError,
    # Ranking errors
    RerankingError,
    ServiceUnavailableError,
    # Validation errors
    ValidationError,
)

__all__ = [
    "CircuitBreaker",
    "ConfigurationError",
    "ErrorContext",
    "ErrorSeverity",
    "InvalidParameterError",
    "InvalidQueryError",
    "MediaHunterError",
    "NetworkError",
    "ParseError",
    "ProviderError",
    "RateLimitError",
    "RerankingError",
    "ServiceUnavailableError",
    "ValidationError",
    "gather_with_errors",
]
