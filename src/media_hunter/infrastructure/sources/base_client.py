"""
Provider HTTP plumbing shared by the Pexels, Pixabay, Giphy and Freesound adapters.

BaseAPIClient owns one httpx.AsyncClient per provider and turns every
transport or payload problem into a ProviderError subclass:
- HTTP 429 is retried, honouring Retry-After, before RateLimitError
- Connection errors are retried with exponential backoff before NetworkError
- HTTP 5xx and an open circuit become ServiceUnavailableError

BaseMediaProvider adds the adapter contract on top:
- Missing API key is a construction-time ConfigurationError
- Incompatible media type short-circuits to an empty result with no request
- Concurrent sub-searches for providers serving several media shapes
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, ClassVar

import httpx
from typing_extensions import Self

from media_hunter.core.async_utils import CircuitBreaker, gather_with_errors
from media_hunter.core.exceptions import (
    ConfigurationError,
    NetworkError,
    ParseError,
    ProviderError,
    RateLimitError,
    ServiceUnavailableError,
)
from media_hunter.domain.entities.media import (
    MediaSource,
    MediaType,
    NormalizedQuery,
    ProviderResult,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

USER_AGENT = "MediaHunter/1.0"


class BaseAPIClient:
    """
    JSON-over-HTTP client for one stock-media API.

    Subclasses set `_service_name` (used in log lines and error messages)
    and call `_make_request()` with a path relative to `base_url`.
    """

    _service_name: str = "API"
    _MAX_RETRIES: int = 2
    _RETRY_BASE_DELAY: float = 1.0

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        circuit_breaker: CircuitBreaker | None = None,
    ) -> None:
        """
        Args:
            base_url: API root; request paths are appended to it
            timeout: Per-request httpx timeout in seconds
            headers: Extra default headers (auth headers for Pexels)
            circuit_breaker: Shared breaker; defaults to 10 failures / 60s recovery
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json", **(headers or {})},
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
        )
        self._circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=10,
            recovery_timeout=60.0,
            name=self._service_name,
        )

    def _build_url(self, url: str) -> str:
        """Build full URL from path or full URL."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self._base_url}{url}"

    async def _make_request(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Make a GET request with retry on 429 and circuit breaker protection.

        Args:
            url: Full URL or path (appended to base_url)
            params: Query string parameters
            headers: Additional headers for this request

        Returns:
            Parsed JSON object

        Raises:
            RateLimitError: Still rate limited after retries
            ServiceUnavailableError: HTTP 5xx or open circuit breaker
            NetworkError: Timeout or connection failure after retries
            ProviderError: Any other non-2xx response
            ParseError: Body is not a JSON object
        """
        full_url = self._build_url(url)

        for attempt in range(self._MAX_RETRIES + 1):
            try:
                async with self._circuit_breaker:
                    response = await self._client.get(full_url, params=params, headers=headers or {})

                    if response.status_code == 429:
                        retry_after = self._get_retry_after(response, attempt)
                        if attempt < self._MAX_RETRIES:
                            logger.warning(
                                f"{self._service_name}: Rate limited (429), "
                                f"retry {attempt + 1}/{self._MAX_RETRIES} in {retry_after:.1f}s"
                            )
                            await asyncio.sleep(retry_after)
                            continue
                        raise RateLimitError(
                            f"{self._service_name}: rate limit exceeded",
                            retry_after=retry_after,
                            source=self._service_name,
                        )

                    if response.status_code >= 500:
                        raise ServiceUnavailableError(
                            f"HTTP {response.status_code}: {response.reason_phrase}",
                            source=self._service_name,
                        )

                    response.raise_for_status()
                    return self._parse_response(response)

            except httpx.HTTPStatusError as e:
                raise ProviderError(
                    f"{self._service_name} HTTP error {e.response.status_code}: {e.response.reason_phrase}",
                    source=self._service_name,
                    retryable=False,
                ) from e
            except httpx.TimeoutException as e:
                raise NetworkError(
                    f"{self._service_name} request timed out after {self._timeout}s",
                    source=self._service_name,
                ) from e
            except httpx.RequestError as e:
                if attempt < self._MAX_RETRIES:
                    delay = self._RETRY_BASE_DELAY * (2**attempt)
                    logger.warning(f"{self._service_name} request error (attempt {attempt + 1}): {e}")
                    await asyncio.sleep(delay)
                    continue
                raise NetworkError(
                    f"{self._service_name} request failed: {e}",
                    source=self._service_name,
                ) from e

        raise NetworkError(f"{self._service_name} request failed after retries", source=self._service_name)

    def _parse_response(self, response: httpx.Response) -> dict[str, Any]:
        """Parse response body as a JSON object."""
        try:
            data = response.json()
        except ValueError as e:
            raise ParseError("invalid JSON response", source=self._service_name) from e
        if not isinstance(data, dict):
            raise ParseError(f"expected JSON object, got {type(data).__name__}", source=self._service_name)
        return data

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


class BaseMediaProvider(BaseAPIClient):
    """
    Adapter contract shared by all media providers.

    Subclasses set `source`, `supported_types`, `_api_key_env` and implement
    `_search()`. Mapping helpers raise ParseError on malformed payloads.

    Example:
        class MyProvider(BaseMediaProvider):
            source = MediaSource.PEXELS
            supported_types = frozenset({MediaType.IMAGE})
            _service_name = "MyAPI"
            _api_key_env = "MYAPI_KEY"

            async def _search(self, query: NormalizedQuery) -> ProviderResult:
                data = await self._make_request("/search", params={"q": query.text})
                ...
    """

    source: ClassVar[MediaSource]
    supported_types: ClassVar[frozenset[MediaType]]
    _api_key_env: ClassVar[str] = ""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError(f"{self._api_key_env} is not configured", source=self.source.value)
        self._api_key = api_key
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
        )

    def serves(self, query: NormalizedQuery) -> bool:
        """Whether this provider has anything to return for the requested type."""
        return any(query.wants(media_type) for media_type in self.supported_types)

    async def search(self, query: NormalizedQuery) -> ProviderResult:
        """Search this provider, returning an empty result for incompatible types."""
        if not self.serves(query):
            logger.debug(f"{self._service_name}: skipping, does not serve type={query.media_type}")
            return ProviderResult.empty()
        return await self._search(query)

    async def _search(self, query: NormalizedQuery) -> ProviderResult:
        """Run the provider-specific request(s) and map the payload."""
        raise NotImplementedError

    async def _search_branches(self, branches: dict[str, Awaitable[ProviderResult]]) -> ProviderResult:
        """
        Run sub-searches (e.g. photos and videos) concurrently and merge them.

        A failed branch contributes zero items and zero total. Only when
        every branch fails is the first error raised.
        """
        names = list(branches)
        outcomes = await gather_with_errors(*branches.values(), return_exceptions=True)

        merged = ProviderResult.empty()
        errors: list[Exception] = []
        for name, outcome in zip(names, outcomes, strict=True):
            if isinstance(outcome, Exception):
                logger.warning(f"{self._service_name} {name} search failed: {outcome}")
                errors.append(outcome)
                continue
            merged.items.extend(outcome.items)
            merged.total += outcome.total

        if errors and len(errors) == len(names):
            raise errors[0]
        return merged

    def _fallback_title(self, label: str, native_id: Any) -> str:
        """Generated title for items whose upstream title is empty."""
        return f"{self.source.display_name} {label} {native_id}"

    def _require(self, payload: dict[str, Any], key: str) -> Any:
        """Fetch a required payload key, raising ParseError when absent."""
        try:
            return payload[key]
        except (KeyError, TypeError) as e:
            raise ParseError(f"missing '{key}' in response", source=self._service_name) from e
