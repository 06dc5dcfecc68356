"""Duration string parsing for the ``?timeout=`` query parameter.

Accepts the Go ``time.ParseDuration`` syntax clients of this service already
send: a possibly signed sequence of decimal numbers, each with an optional
fraction and a mandatory unit suffix, e.g. ``"300ms"``, ``"1.5s"``,
``"2h45m"``.  The bare string ``"0"`` is the only unit-less value accepted.

Valid units: ``ns``, ``us`` (or ``µs``/``μs``), ``ms``, ``s``, ``m``, ``h``.

IMPORT RULES:
  - ``import re2`` ONLY: the input is an untrusted query string.
"""

from __future__ import annotations

import math

import re2

# Seconds per unit suffix.
_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # U+00B5 micro sign
    "μs": 1e-6,  # U+03BC greek mu
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

# Two-letter units are listed before their one-letter prefixes.
_COMPONENT = r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION_RE = re2.compile(r"([-+]?)((?:" + _COMPONENT + r")+)")
_COMPONENT_RE = re2.compile(_COMPONENT)

# Longest duration an int64 nanosecond count can hold (about 2562047h).
MAX_DURATION_SECONDS = (2**63 - 1) / 1e9


class DurationParseError(ValueError):
    """Raised when a duration string does not follow the accepted syntax."""

    def __init__(self, value: str) -> None:
        super().__init__(f"invalid duration {value!r}")
        self.value = value


def parse_duration(value: str) -> float:
    """Parse a duration string into seconds.

    Args:
        value: Duration text such as ``"10s"`` or ``"1m30s"``.

    Returns:
        The duration in seconds. Negative when the string carries a ``-`` sign.

    Raises:
        DurationParseError: On empty input, a missing unit, an unknown unit or
            any other syntax error, or when the magnitude exceeds
            ``MAX_DURATION_SECONDS``.
    """
    if value in ("0", "+0", "-0"):
        return 0.0

    match = _DURATION_RE.fullmatch(value)
    if match is None:
        raise DurationParseError(value)

    total = 0.0
    for component in _COMPONENT_RE.finditer(match.group(2)):
        total += float(component.group(1)) * _UNIT_SECONDS[component.group(2)]

    if not math.isfinite(total) or total > MAX_DURATION_SECONDS:
        raise DurationParseError(value)

    return -total if match.group(1) == "-" else total
