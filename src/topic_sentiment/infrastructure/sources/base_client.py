"""
Base API Client - Common HTTP request pattern with retry, rate limiting, and circuit breaker.

Every source adapter subclasses BaseAPIClient and implements ``search()``.
The base class provides:
- httpx.AsyncClient management
- Automatic retry on 429 (rate limit) with Retry-After support
- Retry with exponential backoff on transport errors
- Circuit breaker for fault tolerance
- The adapter boundary: ``fetch()`` turns any failure into a failed SourceResult
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx
from typing_extensions import Self

from topic_sentiment.domain.entities import RawItem, SourceKind, SourceResult
from topic_sentiment.shared.async_utils import CircuitBreaker
from topic_sentiment.shared.exceptions import (
    AuthenticationError,
    NetworkError,
    ParseError,
    RateLimitError,
    SourceUnavailableError,
)

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Base class for source adapters.

    Subclasses set ``_source`` and implement ``search()``, raising
    SourceUnavailableError subclasses on failure. Callers use ``fetch()``,
    which never raises.

    Example:
        class MyClient(BaseAPIClient):
            _source = SourceKind.NEWS

            async def search(self, query: str) -> list[RawItem]:
                data = await self._make_request("/search", params={"q": query})
                return [RawItem(source=self._source, title=t) for t in data["titles"]]
    """

    _source: SourceKind
    _MAX_RETRIES: int = 2
    _RETRY_BASE_DELAY: float = 1.0
    # Upper bound on an honoured Retry-After; anything longer raises RateLimitError
    _MAX_RETRY_AFTER: float = 5.0

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        min_interval: float = 0.0,
        headers: dict[str, str] | None = None,
        circuit_breaker: CircuitBreaker | None = None,
    ) -> None:
        """
        Initialize base client.

        Args:
            base_url: Base URL for the API (optional, can pass full URLs)
            timeout: Request timeout in seconds
            min_interval: Minimum seconds between requests (rate limiting)
            headers: Default headers for all requests
            circuit_breaker: Optional circuit breaker for fault tolerance.
                             If None, a default one is created (threshold=10, recovery=60s).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._min_interval = min_interval
        self._last_request_time = 0.0
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers=headers or {},
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
        )
        self._circuit_breaker = circuit_breaker or CircuitBreaker(
            name=self.service_name, failure_threshold=10, recovery_timeout=60.0
        )

    @property
    def service_name(self) -> str:
        return self._source.value

    @property
    def source(self) -> SourceKind:
        return self._source

    # -------------------------------------------------------------------------
    # Adapter boundary
    # -------------------------------------------------------------------------

    async def search(self, query: str) -> list[RawItem]:
        """Return normalized items for ``query`` or raise SourceUnavailableError."""
        raise NotImplementedError

    async def fetch(self, query: str) -> SourceResult:
        """Run ``search()`` and convert any failure into a failed SourceResult."""
        try:
            items = await self.search(query)
        except SourceUnavailableError as e:
            logger.warning(f"{self.service_name} fetch failed: {e.reason}")
            return SourceResult.failure(self._source, e.reason, retryable=e.retryable)
        except Exception as e:
            logger.exception(f"{self.service_name} fetch failed unexpectedly: {e}")
            return SourceResult.failure(self._source, f"{type(e).__name__}: {e}")

        logger.info(f"{self.service_name}: {len(items)} items for {query!r}")
        return SourceResult.success(self._source, items)

    # -------------------------------------------------------------------------
    # HTTP plumbing
    # -------------------------------------------------------------------------

    async def _rate_limit(self) -> None:
        """Enforce minimum interval between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_interval:
            await asyncio.sleep(self._min_interval - elapsed)
        self._last_request_time = time.time()

    def _build_url(self, url: str) -> str:
        """Build full URL from path or full URL."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self._base_url}{url}"

    async def _make_request(
        self,
        url: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
    ) -> Any:
        """
        Make HTTP request with retry on 429 and circuit breaker protection.

        Args:
            url: Full URL or path (appended to base_url)
            method: HTTP method (GET or POST)
            params: Query string parameters
            data: Form body for POST requests
            headers: Additional headers for this request
            auth: HTTP Basic credentials

        Returns:
            Parsed JSON body

        Raises:
            AuthenticationError: 401/403 response
            RateLimitError: 429 after retries, or circuit breaker open
            NetworkError: transport failure after retries
            ParseError: body is not JSON
            SourceUnavailableError: any other non-2xx response
        """
        full_url = self._build_url(url)

        for attempt in range(self._MAX_RETRIES + 1):
            await self._rate_limit()
            try:
                async with self._circuit_breaker:
                    response = await self._execute_request(
                        full_url, method=method, params=params, data=data, headers=headers, auth=auth
                    )

                    if response.status_code == 429:
                        retry_after = self._get_retry_after(response, attempt)
                        if retry_after > self._MAX_RETRY_AFTER:
                            raise RateLimitError(
                                f"Retry-After of {retry_after:.0f}s exceeds {self._MAX_RETRY_AFTER:.0f}s limit",
                                source=self.service_name,
                                retry_after=retry_after,
                            )
                        if attempt < self._MAX_RETRIES:
                            logger.warning(
                                f"{self.service_name}: Rate limited (429), "
                                f"retry {attempt + 1}/{self._MAX_RETRIES} in {retry_after:.1f}s"
                            )
                            await asyncio.sleep(retry_after)
                            continue
                        raise RateLimitError(
                            "Rate limit exceeded after retries",
                            source=self.service_name,
                            retry_after=retry_after,
                        )

                    if response.status_code in (401, 403):
                        raise AuthenticationError(
                            f"HTTP {response.status_code} from {full_url}",
                            source=self.service_name,
                        )

                    response.raise_for_status()
                    return self._parse_response(response)

            except httpx.HTTPStatusError as e:
                raise SourceUnavailableError(
                    f"HTTP error {e.response.status_code}: {e.response.reason_phrase}",
                    source=self.service_name,
                ) from e
            except httpx.RequestError as e:
                if attempt < self._MAX_RETRIES:
                    delay = self._RETRY_BASE_DELAY * (2**attempt)
                    logger.warning(f"{self.service_name} request error (attempt {attempt + 1}): {e}")
                    await asyncio.sleep(delay)
                    continue
                raise NetworkError(
                    f"Request failed: {e or type(e).__name__}",
                    source=self.service_name,
                ) from e

        raise NetworkError("Unexpected retry loop exit", source=self.service_name)

    async def _execute_request(
        self,
        url: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
    ) -> httpx.Response:
        """Execute the actual HTTP request. Override for custom behavior."""
        if method == "POST":
            return await self._client.post(url, params=params, data=data, headers=headers or {}, auth=auth)
        return await self._client.get(url, params=params, headers=headers or {})

    def _parse_response(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"invalid JSON body: {e}", source=self.service_name) from e

    @staticmethod
    def _get_retry_after(response: httpx.Response, attempt: int) -> float:
        """Extract Retry-After from response headers, with exponential backoff fallback."""
        try:
            return float(response.headers.get("Retry-After", 2 ** (attempt + 1)))
        except (ValueError, TypeError):
            return float(2 ** (attempt + 1))

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
