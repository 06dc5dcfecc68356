"""/waiting/{milli} — answer "Ok" after sleeping ``milli`` milliseconds.

Accepts any HTTP method.  Used to stand in for a slow backend when testing
curl timeouts against this same service.
"""

from __future__ import annotations

import asyncio

import re2
from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse, PlainTextResponse

router = APIRouter(tags=["waiting"])

_MILLIS_RE = re2.compile(r"[+-]?[0-9]+")

# Largest delay a signed 64-bit millisecond count can hold.
MAX_MILLIS = 2**63 - 1

_WAITING_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def parse_millis(raw: str) -> int:
    """Parse a non-negative integer millisecond count.

    Raises:
        ValueError: On non-numeric, negative or out-of-range input.
    """
    if _MILLIS_RE.fullmatch(raw) is None:
        raise ValueError(f"not an integer: {raw!r}")
    milli = int(raw)
    if milli < 0:
        raise ValueError(f"negative delay: {milli}")
    if milli > MAX_MILLIS:
        raise ValueError(f"delay out of range: {raw}")
    return milli


@router.api_route("/waiting/{milli}", methods=_WAITING_METHODS)
async def waiting(milli: str) -> Response:
    try:
        delay_ms = parse_millis(milli)
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid milliseconds"})

    await asyncio.sleep(delay_ms / 1000)
    return PlainTextResponse("Ok")
