"""
Exception handlers mapping upstream failures to HTTP responses.

- EntityNotFound: 404
- Retryable upstream failure (network, 429, 5xx): 503, with Retry-After when known
- Any other ApiError: 502

An AggregateFailure is mapped by the sub-failure that caused it.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from wikidash.core.exceptions import AggregateFailure, ApiError, EntityNotFound

logger = logging.getLogger(__name__)


def _root_error(exc: ApiError) -> ApiError:
    if isinstance(exc, AggregateFailure) and isinstance(exc.__cause__, ApiError):
        return exc.__cause__
    return exc


def error_status(exc: ApiError) -> int:
    """HTTP status for an upstream failure."""
    root = _root_error(exc)
    if isinstance(root, EntityNotFound):
        return status.HTTP_404_NOT_FOUND
    if root.is_retryable:
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_502_BAD_GATEWAY


def error_body(exc: ApiError) -> dict[str, Any]:
    return {
        "detail": str(exc),
        "code": exc.code,
        "upstream_status": exc.status,
    }


def register_exception_handlers(app: FastAPI) -> None:
    """Register the ApiError handler on the application."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        status_code = error_status(exc)
        if status_code >= 500:
            logger.warning(f"{request.method} {request.url.path} failed upstream: {exc}")

        headers = None
        if status_code == status.HTTP_503_SERVICE_UNAVAILABLE and exc.retry_after is not None:
            headers = {"Retry-After": str(exc.retry_after)}

        return JSONResponse(status_code=status_code, content=error_body(exc), headers=headers)
