"""Error taxonomy for upstream API failures.

Every failure that reaches a repository is an ``ApiError`` subclass. The
``is_retryable`` flag is fixed by the subclass and drives the retry executor:

- NetworkError: no response received (retryable)
- RateLimitError: HTTP 429 (retryable, may carry Retry-After)
- ServerError: HTTP 5xx (retryable)
- ClientError: any other non-success status (fatal)
- EntityNotFound: successful response marking the entity absent (fatal)
- AggregateFailure: a sub-fetch of a composite read failed (fatal)
"""

import httpx


class ApiError(Exception):
    """Classified failure from an upstream API."""

    is_retryable = False

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
        retry_after: int | None = None,
    ):
        self.message = message
        self.status = status
        self.code = code
        self.retry_after = retry_after  # Seconds, from the Retry-After header
        super().__init__(message)


class NetworkError(ApiError):
    """No response was received (connection failure, timeout)."""

    is_retryable = True


class RateLimitError(ApiError):
    """Upstream answered 429 Too Many Requests."""

    is_retryable = True


class ServerError(ApiError):
    """Upstream answered with a 5xx status."""

    is_retryable = True


class ClientError(ApiError):
    """Upstream rejected the request (4xx other than 429)."""


class EntityNotFound(ApiError):
    """The upstream call succeeded but the queried entity does not exist.

    Raised outside the retry loop: the provider answered, so asking again
    cannot change the result.
    """

    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}", code="missing")


class AggregateFailure(ApiError):
    """A composite read failed because one of its sub-fetches failed.

    The failing sub-fetch is chained as ``__cause__``; status, code and
    Retry-After are copied from it when it was an ApiError.
    """

    def __init__(self, operation: str, identifier: str, cause: BaseException):
        self.operation = operation
        self.identifier = identifier
        status = cause.status if isinstance(cause, ApiError) else None
        code = cause.code if isinstance(cause, ApiError) else None
        retry_after = cause.retry_after if isinstance(cause, ApiError) else None
        super().__init__(
            f"{operation} failed for {identifier}: {cause}",
            status=status,
            code=code,
            retry_after=retry_after,
        )


def parse_retry_after(value: str | None) -> int | None:
    """Parse a Retry-After header holding an integer number of seconds.

    HTTP-date values and garbage are ignored (None).
    """
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def classify_response(response: httpx.Response) -> ApiError:
    """Build the ApiError matching a non-success HTTP response."""
    status = response.status_code
    retry_after = parse_retry_after(response.headers.get("Retry-After"))
    try:
        request = response.request
        message = f"{request.method} {request.url} returned {status}"
    except RuntimeError:
        # Response built without a request (tests, replayed fixtures)
        message = f"Upstream returned {status}"

    if status == 429:
        return RateLimitError(message, status, "rate_limited", retry_after)
    if 500 <= status < 600:
        return ServerError(message, status, "server_error", retry_after)
    return ClientError(message, status, "client_error", retry_after)


def classify_transport_error(exc: httpx.TransportError) -> NetworkError:
    """Build the NetworkError for a request that never got a response."""
    return NetworkError(str(exc) or type(exc).__name__, code=type(exc).__name__)
