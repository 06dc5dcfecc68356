"""Health endpoint for http-curl.

GET /health — 503 until the lifespan sets ``app.state.ready``, 200 afterwards.

Polled by container health probes.  ``curl_available`` reports whether the
configured curl binary resolves on PATH; a missing binary degrades the status
because every POST /curl would fail with a launch error.
"""

from __future__ import annotations

import shutil
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from httpcurl.config import Config

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Primary health check endpoint.

    Response body (200):
        {
          "status": "ok" | "degraded",
          "curl_binary": "curl",
          "curl_available": true,
          "default_timeout_s": 10.0,
          "print_args": true
        }
    """
    if not getattr(request.app.state, "ready", False):
        raise HTTPException(
            status_code=503,
            detail={
                "status": "starting",
                "message": "http-curl is starting up...",
            },
        )

    config: Config = request.app.state.config
    curl_available = shutil.which(config.curl.binary) is not None

    return {
        "status": "ok" if curl_available else "degraded",
        "curl_binary": config.curl.binary,
        "curl_available": curl_available,
        "default_timeout_s": config.curl.default_timeout_s,
        "print_args": config.curl.print_args,
    }
