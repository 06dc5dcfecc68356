"""HTTP response builders for POST /curl.

Maps the outcome of a curl invocation to the three success shapes and the two
error shapes of the endpoint:

  build_client_error_response():
      HTTP 400 — the request itself is unusable (wrong Content-Type, bad
      ?timeout=, undecodable body, flag outside the allow-list).
      Body: ``{"error": "<message>"}``.  curl was never launched.

  build_execution_error_response():
      HTTP 500 — curl could not be launched or exceeded its deadline.
      Body: ``{"error": "Error executing curl command: <reason>", "details": "<output>"}``.

  build_result_response():
      HTTP 200 — curl ran to completion (any exit status).
      Body: ``{"result": "<output>"}`` with output decoded as UTF-8, or
      base64-encoded when ``?base64=true``.

  build_plain_response():
      HTTP 200 — ``?plain=true``: the payload verbatim, Content-Type echoed
      from the request's Accept header.

A 400 is never used for an execution failure and a 500 is never used for a
rejected request.
"""

from __future__ import annotations

import base64
from typing import Optional

from fastapi.responses import JSONResponse, Response

from httpcurl.constants import DEFAULT_PLAIN_CONTENT_TYPE
from httpcurl.curl.executor import ExecutionResult


def decode_output(output: bytes) -> str:
    """Decode curl output as UTF-8; undecodable bytes become U+FFFD."""
    return output.decode("utf-8", errors="replace")


def format_output(output: bytes, *, as_base64: bool) -> bytes:
    """Return the payload for a successful response, base64-encoded on request."""
    if as_base64:
        return base64.b64encode(output)
    return output


def build_client_error_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def build_execution_error_response(result: ExecutionResult) -> JSONResponse:
    """Build the HTTP 500 response for a launch failure or timeout.

    The raw output collected before the failure (often empty) is attached as
    ``details`` for operator debugging.
    """
    return JSONResponse(
        status_code=500,
        content={
            "error": f"Error executing curl command: {result.error}",
            "details": decode_output(result.output),
        },
    )


def build_result_response(payload: bytes) -> JSONResponse:
    return JSONResponse(status_code=200, content={"result": decode_output(payload)})


def build_plain_response(payload: bytes, accept: Optional[str]) -> Response:
    """Return ``payload`` as-is; it could be anything, so trust the caller's Accept.

    The Content-Type header is set directly: ``media_type`` would get a
    ``; charset=utf-8`` suffix for ``text/*`` values.
    """
    return Response(
        content=payload,
        status_code=200,
        headers={"content-type": accept or DEFAULT_PLAIN_CONTENT_TYPE},
    )
