"""ULID generation utility for http-curl.

Provides a single `generate_ulid()` function that returns a 26-character ULID
used as the per-request identifier:
  - X-Request-ID response header
  - request_id field on every structured log line emitted for the request

Uses the `python-ulid` library. Do NOT hand-roll ULID generation.
"""

from __future__ import annotations

from ulid import ULID


def generate_ulid() -> str:
    """Generate a new ULID as a 26-character uppercase string.

    Returns:
        str: A 26-character Crockford Base32 ULID (e.g. ``"01KJ0JRVHYA7KX32VPN5ZSCTMV"``).
    """
    return str(ULID())
