"""
Unified Exception Hierarchy for Media Hunter.

Exception Hierarchy:
    MediaHunterError (base)
    ├── ProviderError
    │   ├── NetworkError
    │   ├── RateLimitError
    │   ├── ServiceUnavailableError
    │   └── ParseError
    ├── ConfigurationError
    ├── RerankingError
    └── ValidationError
        ├── InvalidQueryError
        └── InvalidParameterError

Provider and configuration errors are scoped to a single source: the
aggregator turns them into a per-source ``error`` string and logs them at a
level derived from ``severity``. Reranking errors are absorbed into the
fallback order. Validation errors surface as HTTP 400 with their suggestion.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto


class ErrorSeverity(Enum):
    """How loudly an error should be reported."""

    WARNING = auto()  # Response still served (ranking fallback, bad input)
    ERROR = auto()  # One source lost for this search
    CRITICAL = auto()  # Source unusable until reconfigured
    TRANSIENT = auto()  # Upstream throttling or outage


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where an error happened and what the caller could do about it."""

    source: str | None = None
    suggestion: str | None = None
    retry_after: float | None = None


class MediaHunterError(Exception):
    """
    Root of every error raised by Media Hunter.

    Carries an ErrorContext (which source, what to do next) plus severity
    and retryability so the HTTP layer and logs can describe the failure.
    """

    __slots__ = ("context", "severity", "retryable")

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.retryable = retryable


# =============================================================================
# Provider Errors
# =============================================================================


class ProviderError(MediaHunterError):
    """Base class for failures of a single media provider."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
        retryable: bool = True,
    ) -> None:
        ctx = context or ErrorContext()
        if source and not ctx.source:
            ctx = replace(ctx, source=source)
        super().__init__(
            message,
            context=ctx,
            severity=ErrorSeverity.ERROR,
            retryable=retryable,
        )

    @property
    def source(self) -> str | None:
        return self.context.source


class NetworkError(ProviderError):
    """Raised for network connectivity issues and timeouts."""

    def __init__(
        self,
        message: str = "Network connection failed",
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, source=source, context=context, retryable=True)


class RateLimitError(ProviderError):
    """Raised when a provider's rate limit is exceeded."""

    def __init__(
        self,
        message: str = "API rate limit exceeded",
        *,
        retry_after: float = 1.0,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = replace(
            ctx,
            suggestion=ctx.suggestion or "Wait and retry the request",
            retry_after=retry_after,
        )
        super().__init__(message, source=source, context=ctx, retryable=True)
        self.severity = ErrorSeverity.TRANSIENT


class ServiceUnavailableError(ProviderError):
    """Raised when a provider is temporarily unavailable (5xx, open circuit)."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{message}", source=source, context=context, retryable=True)
        self.severity = ErrorSeverity.TRANSIENT


class ParseError(ProviderError):
    """Raised when a provider payload does not have the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        full_msg = f"Parse error: {message}"
        if source:
            full_msg = f"Parse error ({source}): {message}"
        super().__init__(full_msg, source=source, context=context, retryable=False)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MediaHunterError):
    """Raised when a provider is missing required configuration (API key)."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        if source and not ctx.source:
            ctx = replace(ctx, source=source)
        super().__init__(
            message,
            context=ctx,
            severity=ErrorSeverity.CRITICAL,
            retryable=False,
        )


# =============================================================================
# Ranking Errors
# =============================================================================


class RerankingError(MediaHunterError):
    """Raised when embedding or similarity computation fails."""

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
            retryable=False,
        )


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(MediaHunterError):
    """Base class for request validation errors."""

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
            retryable=False,
        )


class InvalidQueryError(ValidationError):
    """Raised when the search query is missing or empty."""

    def __init__(
        self,
        reason: str = "Query parameter is required",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = replace(ctx, suggestion=ctx.suggestion or "Provide a non-empty search query")
        super().__init__(reason, context=ctx)


class InvalidParameterError(ValidationError):
    """Raised when a query-string value cannot be used (bad page, unknown orderBy)."""

    def __init__(
        self,
        param_name: str,
        value: object,
        expected: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = replace(ctx, suggestion=f"Expected {expected}")
        super().__init__(
            f"Invalid parameter '{param_name}': {value!r} (expected {expected})",
            context=ctx,
        )
