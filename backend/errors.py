"""Feed exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class FeedError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(FeedError):
    """Request target is missing or empty; raised before any network call."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


class UpstreamTransportError(FeedError):
    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class UpstreamStatusError(UpstreamTransportError):
    def __init__(self, upstream_status: int, reason: str = ""):
        super().__init__(f"Upstream returned HTTP {upstream_status} {reason}".rstrip())
        self.upstream_status = upstream_status


class ResponseReadError(FeedError):
    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class PayloadValidationError(FeedError):
    """Upstream body does not conform to the search response schema."""

    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class FetchCancelledError(FeedError):
    """The caller's deadline ran out before the fetch finished."""

    def __init__(self, message: str = "Deadline exceeded before the feed was available"):
        super().__init__(message, status_code=504)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(FeedError)
    async def handle_feed_error(_request: Request, exc: FeedError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
