"""
Resilient HTTP client shared by all Wikimedia transport clients.

Composes an httpx AsyncClient (connection pooling, base URL, default headers
and params) with a RateLimiter and a RetryExecutor. Every request attempt
goes through the limiter; failures are classified into the ApiError
taxonomy and retried when retryable.

Each transport client owns its own BaseApiClient, so the query, statistics
and metrics APIs are rate limited independently.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

import httpx

from wikidash.core.exceptions import (
    ApiError,
    ClientError,
    classify_response,
    classify_transport_error,
)
from wikidash.core.rate_limit import RateLimiter
from wikidash.core.retry import RetryExecutor

logger = logging.getLogger(__name__)

ParamValue: TypeAlias = str | int | float | bool
Params: TypeAlias = Mapping[str, ParamValue | None]

# Supplies auth headers for privileged calls; consulted on every attempt
CredentialSupplier: TypeAlias = Callable[[], Mapping[str, str]]


@dataclass
class ApiResponse:
    """Normalized successful response."""

    data: Any
    status: int
    headers: dict[str, str] = field(default_factory=dict)


def clean_params(params: Params | None) -> dict[str, ParamValue] | None:
    """Drop None-valued params so they are not sent as empty strings."""
    if params is None:
        return None
    return {key: value for key, value in params.items() if value is not None}


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class BaseApiClient:
    """HTTP client with per-instance rate limiting and retry with backoff."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        default_headers: Mapping[str, str] | None = None,
        default_params: Mapping[str, ParamValue] | None = None,
        min_request_interval: float = 0.2,
        max_retries: int = 3,
        initial_backoff: float = 1.0,
        backoff_jitter: float = 1.0,
        credentials: CredentialSupplier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        rate_limiter: RateLimiter | None = None,
        retry_executor: RetryExecutor | None = None,
    ):
        """
        Args:
            base_url: Root URL every endpoint is resolved against
            timeout: Per-request timeout in seconds (the only timeout there is)
            default_headers: Headers sent with every request (User-Agent, Accept)
            default_params: Query params sent with every request
            min_request_interval: Minimum seconds between request starts
            max_retries: Total attempts per request, the first one included
            initial_backoff: Backoff in seconds after the first failed attempt
            backoff_jitter: Upper bound of the random jitter added to backoff
            credentials: Optional supplier of auth headers
            transport: Optional httpx transport (tests use httpx.MockTransport)
            rate_limiter: Override of the limiter built from min_request_interval
            retry_executor: Override of the executor built from the retry settings
        """
        self.base_url = base_url
        self.rate_limiter = rate_limiter or RateLimiter(min_request_interval)
        self.retry_executor = retry_executor or RetryExecutor(
            max_attempts=max_retries,
            initial_backoff=initial_backoff,
            jitter=backoff_jitter,
        )
        self._credentials = credentials
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            headers=dict(default_headers or {}),
            params=dict(default_params or {}),
            follow_redirects=True,
            transport=transport,
        )
        logger.debug(f"Created API client for {base_url}")

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def get(self, endpoint: str, params: Params | None = None) -> ApiResponse:
        """GET request with rate limiting and retry."""
        return await self.request("GET", endpoint, params=params)

    async def post(
        self, endpoint: str, body: Any = None, params: Params | None = None
    ) -> ApiResponse:
        """POST request with rate limiting and retry."""
        return await self.request("POST", endpoint, body=body, params=params)

    async def put(
        self, endpoint: str, body: Any = None, params: Params | None = None
    ) -> ApiResponse:
        """PUT request with rate limiting and retry."""
        return await self.request("PUT", endpoint, body=body, params=params)

    async def delete(self, endpoint: str, params: Params | None = None) -> ApiResponse:
        """DELETE request with rate limiting and retry."""
        return await self.request("DELETE", endpoint, params=params)

    async def request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        params: Params | None = None,
    ) -> ApiResponse:
        """
        Issue a request through the limiter and retry executor.

        Returns:
            ApiResponse with decoded body, status and lowercase headers

        Raises:
            ApiError: Classified failure (the last one when retries ran out)
        """
        query = clean_params(params)

        async def attempt(number: int) -> ApiResponse:
            await self.rate_limiter.acquire()
            headers = dict(self._credentials()) if self._credentials else None
            logger.debug(f"{method} {self.base_url}{endpoint} (attempt {number + 1})")
            try:
                response = await self._client.request(
                    method,
                    endpoint,
                    params=query,
                    json=body,
                    headers=headers,
                )
            except httpx.TransportError as e:
                raise classify_transport_error(e) from e

            if not response.is_success:
                raise classify_response(response)

            return ApiResponse(
                data=_decode_body(response),
                status=response.status_code,
                headers=dict(response.headers),
            )

        try:
            return await self.retry_executor.execute(attempt)
        except ApiError:
            raise
        except httpx.HTTPError as e:
            # Anything httpx raises outside the transport layer (bad URL, ...)
            raise ClientError(str(e), code=type(e).__name__) from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client. Call on app shutdown."""
        if not self._client.is_closed:
            await self._client.aclose()
            logger.debug(f"Closed API client for {self.base_url}")

    async def __aenter__(self) -> "BaseApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
