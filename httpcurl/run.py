"""Programmatic uvicorn entry point for http-curl.

Reads host, port and the concurrency cap from the loaded config
(0.0.0.0:8080 by default; ``PORT`` overrides the port).

Usage:
    python -m httpcurl.run
    http-curl                 # via pyproject.toml [project.scripts]

``limit_concurrency`` is the only backpressure on curl child processes:
uvicorn answers HTTP 503 once that many connections are open.
"""

from __future__ import annotations

import uvicorn

from httpcurl.config import load_config

# OS-level TCP connection backlog queue size.
UVICORN_BACKLOG: int = 50

# HTTP keep-alive timeout in seconds.
UVICORN_TIMEOUT_KEEP_ALIVE: int = 5


def main() -> None:
    """Start the http-curl server.

    Raises:
        SystemExit: Propagated from load_config() on config parse errors.
    """
    config = load_config()

    uvicorn.run(
        "httpcurl.main:app",
        host=config.server.host,
        port=config.server.port,
        limit_concurrency=config.server.limit_concurrency,
        backlog=UVICORN_BACKLOG,
        timeout_keep_alive=UVICORN_TIMEOUT_KEEP_ALIVE,
        access_log=False,  # RequestLoggingMiddleware writes the access log
    )


if __name__ == "__main__":
    main()
