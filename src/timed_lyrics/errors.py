"""Error handling and retry logic for timed-lyrics.

Provides:
- Custom exception hierarchy for catalog and configuration failures
- Retry logic with exponential backoff for catalog requests
- Mapping of raw network errors onto that hierarchy

The lyrics parser itself never raises these for bad markup; it degrades
to returning fewer paragraphs instead.
"""

from __future__ import annotations

import functools
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, TypeVar

from timed_lyrics.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ErrorCategory(str, Enum):
    """Categories of errors for handling decisions."""

    TRANSIENT = "transient"  # Network, timeout - can retry
    RATE_LIMIT = "rate_limit"  # API rate limit - wait and retry
    VALIDATION = "validation"  # Bad input - don't retry
    CONFIGURATION = "configuration"  # Bad config - don't retry
    EXTERNAL = "external"  # Catalog service error - may retry
    INTERNAL = "internal"  # Bug in code - don't retry


class TimedLyricsError(Exception):
    """Base exception for timed-lyrics errors.

    Attributes:
        message: Human-readable error message
        category: Error category for handling
        context: Additional context information
        recoverable: Whether the error is recoverable
    """

    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        context: dict | None = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (context: {self.context})"
        return self.message


class TransientError(TimedLyricsError):
    """Transient error that can be retried.

    Examples: network timeouts, temporary service unavailability.
    """

    category = ErrorCategory.TRANSIENT

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=True)


class RateLimitError(TimedLyricsError):
    """Catalog rate limit exceeded.

    Attributes:
        retry_after: Seconds to wait before retrying
    """

    category = ErrorCategory.RATE_LIMIT

    def __init__(
        self,
        message: str,
        retry_after: float = 60.0,
        context: dict | None = None,
    ):
        super().__init__(message, context, recoverable=True)
        self.retry_after = retry_after


class ConfigurationError(TimedLyricsError):
    """Configuration error.

    Examples: unreadable config file, invalid settings.
    """

    category = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class MissingDeveloperTokenError(ConfigurationError):
    """No developer token was supplied for a catalog request."""

    def __init__(self, context: dict | None = None):
        super().__init__(
            "Developer token is missing or invalid. Provide one with --token "
            "or the TIMED_LYRICS_DEVELOPER_TOKEN environment variable.",
            context,
        )


class InvalidURLError(TimedLyricsError):
    """A catalog URL could not be built from the request parameters."""

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(f"Failed to construct URL: {message}", context, recoverable=False)


class ExternalServiceError(TimedLyricsError):
    """Catalog service error."""

    category = ErrorCategory.EXTERNAL

    def __init__(
        self,
        message: str,
        context: dict | None = None,
        recoverable: bool = True,
    ):
        super().__init__(message, context, recoverable=recoverable)


class APIError(ExternalServiceError):
    """The catalog answered with an error status.

    Attributes:
        status: HTTP status code
        code: Error code from the response body, if any
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
        context: dict | None = None,
    ):
        # 5xx responses are worth another attempt, 4xx are not
        recoverable = status is not None and status >= 500
        super().__init__(f"API error: {message}", context, recoverable=recoverable)
        self.status = status
        self.code = code


class EmptyResponseError(ExternalServiceError):
    """The catalog response carried no lyrics."""

    def __init__(self, context: dict | None = None):
        super().__init__("The API returned an empty response.", context, recoverable=False)


class DecodingError(ExternalServiceError):
    """The catalog response could not be decoded."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(f"Decoding error: {message}", context, recoverable=False)


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum number of attempts
        initial_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries
        exponential_base: Base for exponential backoff
        jitter: Whether to add random jitter to delays
        retryable_errors: Error types that should be retried
    """

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True
    retryable_errors: tuple = (TransientError, RateLimitError, ExternalServiceError)


@dataclass
class RetryState:
    """State of a retry operation."""

    attempt: int = 0
    total_attempts: int = 3
    last_error: Exception | None = None
    delays: list[float] = field(default_factory=list)


def calculate_delay(
    attempt: int,
    config: RetryConfig,
    rate_limit_delay: float | None = None,
) -> float:
    """Calculate delay before next retry.

    Args:
        attempt: Current attempt number (1-indexed)
        config: Retry configuration
        rate_limit_delay: Optional delay from rate limit error

    Returns:
        Delay in seconds
    """
    if rate_limit_delay is not None:
        base_delay = rate_limit_delay
    else:
        base_delay = config.initial_delay * (config.exponential_base ** (attempt - 1))

    delay = min(base_delay, config.max_delay)

    if config.jitter:
        jitter_range = delay * 0.25  # 25% jitter
        delay = delay + random.uniform(-jitter_range, jitter_range)
        delay = max(0.1, delay)

    return delay


def is_retryable(error: Exception, config: RetryConfig) -> bool:
    """Check if an error should be retried.

    Args:
        error: The error to check
        config: Retry configuration

    Returns:
        True if the error should be retried
    """
    if isinstance(error, config.retryable_errors):
        if hasattr(error, "recoverable"):
            return error.recoverable
        return True

    if isinstance(error, TimedLyricsError):
        return False

    error_str = str(error).lower()
    transient_patterns = [
        "timeout",
        "timed out",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "502",
        "503",
        "504",
    ]

    return any(pattern in error_str for pattern in transient_patterns)


def retry_with_backoff(
    config: RetryConfig | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for retrying functions with exponential backoff.

    Args:
        config: Retry configuration

    Returns:
        Decorator function
    """
    config = config or RetryConfig()

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            state = RetryState(total_attempts=config.max_attempts)

            while True:
                state.attempt += 1

                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    state.last_error = e

                    if not is_retryable(e, config):
                        logger.warning(
                            f"Non-retryable error in {func.__name__}: {e}",
                            extra={"error_type": type(e).__name__},
                        )
                        raise

                    if state.attempt >= config.max_attempts:
                        logger.error(
                            f"Max retries ({config.max_attempts}) exceeded for {func.__name__}",
                            extra={"error": str(e), "attempts": state.attempt},
                        )
                        raise

                    rate_limit_delay = None
                    if isinstance(e, RateLimitError):
                        rate_limit_delay = e.retry_after

                    delay = calculate_delay(state.attempt, config, rate_limit_delay)
                    state.delays.append(delay)

                    logger.info(
                        f"Retrying {func.__name__} in {delay:.1f}s "
                        f"(attempt {state.attempt}/{config.max_attempts})",
                        extra={"error": str(e), "delay": delay},
                    )

                    time.sleep(delay)

        return wrapper

    return decorator


def wrap_external_error(
    error: Exception,
    service: str,
    operation: str,
    code: str | None = None,
) -> TimedLyricsError:
    """Wrap a raw network error in a TimedLyricsError.

    Args:
        error: Original error
        service: Name of external service
        operation: Operation being performed
        code: Error code reported by the service, if any

    Returns:
        Wrapped TimedLyricsError
    """
    if isinstance(error, TimedLyricsError):
        return error

    context = {"service": service, "operation": operation}
    status = getattr(error, "code", None)
    error_str = str(error).lower()

    if status == 429 or "rate limit" in error_str:
        retry_after = 60.0
        headers = getattr(error, "headers", None)
        if headers is not None and headers.get("Retry-After"):
            try:
                retry_after = float(headers.get("Retry-After"))
            except ValueError:
                pass

        return RateLimitError(
            f"Rate limit exceeded for {service}: {operation}",
            retry_after=retry_after,
            context=context,
        )

    if isinstance(status, int):
        return APIError(
            f"{service} returned {status} for {operation}",
            status=status,
            code=code,
            context=context,
        )

    transient_patterns = ["timeout", "timed out", "connection", "temporary", "unavailable"]
    if isinstance(error, TimeoutError) or any(p in error_str for p in transient_patterns):
        return TransientError(
            f"Transient error from {service}: {operation} - {error}",
            context=context,
        )

    return ExternalServiceError(
        f"Network error from {service}: {operation} - {error}",
        context=context,
        recoverable=True,
    )


def format_error_for_display(error: Exception) -> str:
    """Format an error message for user display.

    Args:
        error: Error to format

    Returns:
        Human-readable error message
    """
    if isinstance(error, TimedLyricsError):
        category = error.category.value

        if error.context:
            context_str = ", ".join(f"{k}={v}" for k, v in error.context.items())
            return f"[{category}] {error.message} ({context_str})"

        return f"[{category}] {error.message}"

    return f"[error] {type(error).__name__}: {error}"
