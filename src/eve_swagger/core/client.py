"""
eve-swagger HTTP Client

Async HTTP client for the EVE Online ESI API using httpx.

Every resource wrapper in the package ultimately sends its requests through
one ESIClient, which owns connection pooling, the datasource parameter,
error-limit tracking and retry.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass, field
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Any, Optional, Union

import httpx

from .config import get_settings
from .constants import (
    ERROR_LIMIT_BACKOFF_THRESHOLD,
    ERROR_LIMIT_DEFAULT,
    ERROR_LIMIT_MAX_WAIT,
)
from .logging import get_logger
from .retry import NonRetryableESIError, RetryableESIError, classify_httpx_error, esi_retry

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = get_logger(__name__)

JSONValue = Union[dict, list, int, float, str, None]


# =============================================================================
# Response Types
# =============================================================================


@dataclass
class ESIResponse:
    """
    ESI response with headers.

    Returned by request_with_headers() so that callers can read pagination
    (X-Pages) and cache headers alongside the parsed body.
    """

    data: JSONValue
    """Parsed JSON response body."""

    headers: dict[str, str] = field(default_factory=dict)
    """HTTP response headers."""

    status_code: int = 200
    """HTTP status code."""

    def _header(self, name: str) -> Optional[str]:
        return self.headers.get(name) or self.headers.get(name.lower())

    @property
    def last_modified_timestamp(self) -> int | None:
        """Parse Last-Modified header to Unix timestamp."""
        header = self._header("Last-Modified")
        if not header:
            return None
        try:
            return int(parsedate_to_datetime(header).timestamp())
        except (ValueError, TypeError):
            return None

    @property
    def expires_timestamp(self) -> int | None:
        """Parse Expires header to Unix timestamp."""
        header = self._header("Expires")
        if not header:
            return None
        try:
            return int(parsedate_to_datetime(header).timestamp())
        except (ValueError, TypeError):
            return None

    @property
    def x_pages(self) -> int | None:
        """Parse X-Pages header for pagination."""
        header = self._header("X-Pages")
        if not header:
            return None
        try:
            return int(header)
        except (ValueError, TypeError):
            return None

    @property
    def is_not_modified(self) -> bool:
        """Check if response was 304 Not Modified."""
        return self.status_code == 304


# =============================================================================
# Exceptions
# =============================================================================


class ESIError(Exception):
    """Exception raised for ESI API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.response = response or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to JSON-serializable dict."""
        result: dict[str, Any] = {"error": "esi_error", "message": self.message}
        if self.status_code:
            result["status_code"] = self.status_code
        return result


# =============================================================================
# Client
# =============================================================================


class ESIClient:
    """
    Async HTTP client for ESI API requests.

    Can be used as an async context manager, or left open and closed
    explicitly with aclose(). The underlying httpx.AsyncClient is created
    lazily on first request.

    Usage:
        async with ESIClient() as client:
            region = await client.request("GET", "/universe/regions/10000002/")

        # Authenticated
        async with ESIClient() as client:
            contacts = await client.request(
                "GET", "/characters/12345/contacts/", token="access_token"
            )
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        datasource: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize ESI client.

        Args:
            base_url: ESI base URL (default from settings)
            datasource: ESI datasource (default from settings)
            timeout: Request timeout in seconds (default from settings)
            user_agent: User-Agent header (default from settings)
            transport: Optional httpx transport, mainly for tests
        """
        settings = get_settings()
        self.base_url: str = (base_url or settings.base_url).rstrip("/")
        self.datasource: str = datasource or settings.datasource
        self.timeout: float = timeout if timeout is not None else settings.timeout
        self.user_agent: str = user_agent or settings.user_agent
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        # Rate limiting state
        self._error_limit_remain: int = ERROR_LIMIT_DEFAULT
        self._error_limit_reset: float = 0
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> ESIClient:
        self._get_client()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json", "User-Agent": self.user_agent},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _build_params(self, params: Optional[Mapping[str, Any]] = None) -> list[tuple[str, str]]:
        """
        Build query parameters with the datasource.

        List values are sent comma-separated, booleans lowercase, and None
        values are dropped.
        """
        query: list[tuple[str, str]] = [("datasource", self.datasource)]
        for key, value in (params or {}).items():
            if value is None:
                continue
            if isinstance(value, bool):
                query.append((key, "true" if value else "false"))
            elif isinstance(value, (list, tuple, set, frozenset)):
                query.append((key, ",".join(str(v) for v in value)))
            else:
                query.append((key, str(value)))
        return query

    def _update_rate_limits(self, headers: Mapping[str, str]) -> None:
        """Update rate limit tracking from ESI response headers."""
        if "x-esi-error-limit-remain" in headers:
            try:
                self._error_limit_remain = int(headers["x-esi-error-limit-remain"])
            except (ValueError, TypeError):
                pass

        if "x-esi-error-limit-reset" in headers:
            try:
                self._error_limit_reset = time.time() + int(headers["x-esi-error-limit-reset"])
            except (ValueError, TypeError):
                pass

    async def _check_rate_limit(self) -> None:
        """Back off briefly if the ESI error limit is close to exhausted."""
        async with self._lock:
            if time.time() > self._error_limit_reset:
                self._error_limit_remain = ERROR_LIMIT_DEFAULT

            if self._error_limit_remain < ERROR_LIMIT_BACKOFF_THRESHOLD:
                wait_time = max(0.0, self._error_limit_reset - time.time())
                wait_time = min(wait_time, ERROR_LIMIT_MAX_WAIT)
                if wait_time > 0:
                    logger.warning(
                        "ESI error limit low (%d remaining), backing off %.1fs",
                        self._error_limit_remain,
                        wait_time,
                    )
                    await asyncio.sleep(wait_time)

    @esi_retry()
    async def _send(
        self,
        method: str,
        endpoint: str,
        params: Optional[Mapping[str, Any]],
        body: Any,
        token: Optional[str],
    ) -> ESIResponse:
        """Send one request; raises the retry exceptions on HTTP failure."""
        await self._check_rate_limit()

        if not endpoint.startswith("/"):
            endpoint = "/" + endpoint

        headers: dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        client = self._get_client()
        response = await client.request(
            method,
            endpoint,
            params=self._build_params(params),
            json=body,
            headers=headers or None,
        )
        self._update_rate_limits(response.headers)

        if response.status_code == 304:
            return ESIResponse(data=None, headers=dict(response.headers), status_code=304)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise classify_httpx_error(e) from e

        data: JSONValue = None
        if response.status_code != 204 and response.content:
            data = response.json()

        return ESIResponse(
            data=data,
            headers=dict(response.headers),
            status_code=response.status_code,
        )

    async def request_with_headers(
        self,
        method: str,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        token: Optional[str] = None,
    ) -> ESIResponse:
        """
        Make a request and return the response with headers.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint path
            params: Optional query parameters
            body: Optional JSON body
            token: OAuth access token; adds a bearer Authorization header

        Returns:
            ESIResponse with data, headers and status code

        Raises:
            ESIError: On HTTP errors, network failures or invalid JSON
        """
        try:
            return await self._send(method.upper(), endpoint, params, body, token)
        except (RetryableESIError, NonRetryableESIError) as e:
            raise ESIError(e.message, status_code=e.status_code) from e
        except httpx.RequestError as e:
            raise ESIError(f"Network error: {e}") from e
        except json.JSONDecodeError as e:
            raise ESIError(f"Invalid JSON response: {e}") from e

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        token: Optional[str] = None,
    ) -> JSONValue:
        """Make a request and return only the parsed JSON body."""
        response = await self.request_with_headers(method, endpoint, params, body, token)
        return response.data

    async def get(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        token: Optional[str] = None,
    ) -> JSONValue:
        return await self.request("GET", endpoint, params, token=token)

    async def post(
        self,
        endpoint: str,
        body: Any,
        params: Optional[Mapping[str, Any]] = None,
        token: Optional[str] = None,
    ) -> JSONValue:
        return await self.request("POST", endpoint, params, body, token)
