"""Request middleware for http-curl.

BodySizeLimitMiddleware:
    Caps request bodies (1 MB unless configured otherwise) before any route
    handler runs, so an oversized body never reaches JSON decoding.  A declared
    Content-Length is checked without reading the body; otherwise the stream is
    read with a rolling cap.

RequestLoggingMiddleware:
    Assigns every request a ULID and binds it, with the method and path, to the
    structlog context.  The id is echoed in ``X-Request-ID`` and one access-log
    line per request records status and latency.
"""

from __future__ import annotations

import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from httpcurl.constants import MAX_REQUEST_BODY_BYTES
from httpcurl.utils.logger import bind_request_context, clear_request_context, get_logger
from httpcurl.utils.ulid import generate_ulid

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_MB = 1_048_576


def _describe_limit(max_body_bytes: int) -> str:
    if max_body_bytes % _MB == 0:
        return f"{max_body_bytes // _MB}MB"
    return f"{max_body_bytes} bytes"


def _parse_content_length(raw: str) -> Optional[int]:
    """Return the declared size, or None if the header is not a non-negative integer."""
    if not raw.isascii() or not raw.isdigit():
        return None
    return int(raw)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies larger than ``max_body_bytes``.

      - Content-Length above the limit         → HTTP 413, body never read
      - Content-Length not a non-negative int  → HTTP 400
      - No Content-Length, stream over limit   → HTTP 413
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int = MAX_REQUEST_BODY_BYTES) -> None:
        super().__init__(app)
        self.max_body_bytes = max_body_bytes
        self._too_large_body = {
            "error": f"Request body too large. Maximum size: {_describe_limit(max_body_bytes)}",
        }

    def _too_large(self, size: int) -> JSONResponse:
        logger.warning("Request body too large", size=size, limit=self.max_body_bytes)
        return JSONResponse(status_code=413, content=self._too_large_body)

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        content_length_header = request.headers.get("content-length")

        if content_length_header is not None:
            declared_size = _parse_content_length(content_length_header)
            if declared_size is None:
                logger.warning("Invalid Content-Length header", value=content_length_header)
                return JSONResponse(
                    status_code=400, content={"error": "Invalid Content-Length header"}
                )
            if declared_size > self.max_body_bytes:
                return self._too_large(declared_size)
            return await call_next(request)

        body = bytearray()
        async for chunk in request.stream():
            body += chunk
            if len(body) > self.max_body_bytes:
                return self._too_large(len(body))

        # Request.body() returns the cached _body, so the handler sees the bytes
        # already drained from the stream.
        request._body = bytes(body)  # type: ignore[attr-defined]
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Per-request ULID + one structured access-log line."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        request_id = generate_ulid()
        bind_request_context(request_id, method=request.method, path=request.url.path)
        t0 = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "request",
                status_code=response.status_code,
                latency_ms=round((time.perf_counter() - t0) * 1000, 2),
            )
            return response
        finally:
            clear_request_context()
