"""
eve-swagger Retry Logic

Resilient HTTP request handling with exponential backoff for transient failures.

- Retries on 429 (rate limited), honouring Retry-After
- Retries on 502/503/504 gateway errors
- Retries on network errors (httpx.RequestError)
- Jitter to prevent thundering herd

Set EVE_SWAGGER_NO_RETRY=1 to send every request exactly once.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, Optional, TypeVar, Union

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from .config import is_retry_disabled
from .logging import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT = 2  # seconds
DEFAULT_MAX_WAIT = 30  # seconds

RETRYABLE_STATUS_CODES = {
    429,  # Too Many Requests
    502,  # Bad Gateway
    503,  # Service Unavailable
    504,  # Gateway Timeout
}

NON_RETRYABLE_STATUS_CODES = {
    400,
    401,
    403,
    404,
    420,  # ESI error limited: retrying only makes it worse
    422,
}


class RetryableESIError(Exception):
    """
    Exception for retryable ESI errors.

    Raised inside the retry loop for HTTP errors that should be attempted
    again. Converted to ESIError once attempts are exhausted.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retry_after: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        self.message: str = message
        self.status_code: Optional[int] = status_code
        self.retry_after: Optional[int] = retry_after
        self.original_error: Optional[Exception] = original_error
        super().__init__(self.message)


class NonRetryableESIError(Exception):
    """Exception for ESI errors that must not be retried (404, 403, ...)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        self.message: str = message
        self.status_code: Optional[int] = status_code
        self.original_error: Optional[Exception] = original_error
        super().__init__(self.message)


def is_retry_enabled() -> bool:
    """Return False when EVE_SWAGGER_NO_RETRY is set."""
    return not is_retry_disabled()


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        # HTTP-date form is not used by ESI
        return None


def _should_retry_exception(exc: BaseException) -> bool:
    """
    Determine if an exception should trigger a retry.

    Args:
        exc: The exception to check

    Returns:
        True if the request should be retried
    """
    if isinstance(exc, RetryableESIError):
        return True
    if isinstance(exc, NonRetryableESIError):
        return False
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    if isinstance(exc, httpx.RequestError):
        return True
    return False


def _error_message(error: httpx.HTTPStatusError) -> str:
    """Pull ESI's {"error": "..."} message out of a failed response."""
    try:
        error_json = error.response.json()
    except ValueError:
        return error.response.text or str(error)
    if isinstance(error_json, dict):
        return str(error_json.get("error", error))
    return str(error)


def classify_httpx_error(
    error: httpx.HTTPStatusError,
) -> Union[RetryableESIError, NonRetryableESIError]:
    """
    Classify an httpx HTTP status error as retryable or non-retryable.

    Args:
        error: The httpx HTTPStatusError to classify

    Returns:
        RetryableESIError for transient errors (429, 503, etc.)
        NonRetryableESIError for permanent errors (404, 401, etc.)
    """
    status_code = error.response.status_code
    message = _error_message(error)

    if status_code in RETRYABLE_STATUS_CODES:
        return RetryableESIError(
            message=message,
            status_code=status_code,
            retry_after=_parse_retry_after(error.response.headers.get("retry-after")),
            original_error=error,
        )
    return NonRetryableESIError(message=message, status_code=status_code, original_error=error)


class wait_retry_after(wait_base):
    """
    Wait for the Retry-After the server sent, falling back to another wait.

    Retry-After takes precedence when the last attempt raised a
    RetryableESIError carrying one. The wait is capped at max_wait.
    """

    def __init__(self, fallback: wait_base, max_wait: float = DEFAULT_MAX_WAIT) -> None:
        self.fallback = fallback
        self.max_wait = max_wait

    def __call__(self, retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        exc = outcome.exception() if outcome is not None and outcome.failed else None
        if isinstance(exc, RetryableESIError) and exc.retry_after is not None:
            jitter = random.uniform(0, 0.5)
            return min(exc.retry_after + jitter, self.max_wait)
        return self.fallback(retry_state)


def esi_retry(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait: float = DEFAULT_MIN_WAIT,
    max_wait: float = DEFAULT_MAX_WAIT,
) -> Callable[[F], F]:
    """
    Decorator for async ESI requests with retry logic.

    The retry switch is read on every call, so tests and callers can toggle
    EVE_SWAGGER_NO_RETRY without re-importing.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait: Initial wait between attempts in seconds (default: 2)
        max_wait: Maximum wait between attempts in seconds (default: 30)

    Usage:
        @esi_retry()
        async def make_request(url):
            ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not is_retry_enabled():
                return await func(*args, **kwargs)

            retrying = AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait_retry_after(
                    wait_exponential_jitter(
                        initial=min_wait,
                        max=max_wait,
                        jitter=max_wait * 0.1,
                    ),
                    max_wait,
                ),
                retry=retry_if_exception(_should_retry_exception),
                before_sleep=before_sleep_log(logger, logging.INFO),
                reraise=True,
            )
            async for attempt in retrying:
                with attempt:
                    return await func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
