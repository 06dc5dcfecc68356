"""Curl option decoding and sanitization.

A request body is a JSON object mapping curl flag names to either a single
string or a list of strings::

    {"-X": "POST", "-d": "hello", "-H": ["A: 1", "B: 2"]}

``CurlOptions`` decodes that shape and normalizes every value to a list, so the
sanitizer only ever sees ``dict[str, list[str]]``.

``sanitize_input()`` is the security boundary: it rejects any flag outside
``ALLOWED_CURL_OPTIONS``.  Values are NOT inspected beyond the standalone-switch
check: a value that looks like a flag (``"-o /etc/passwd"``) is handed to curl
as a single argv element for the preceding allowed flag.  The child is launched
without a shell, so no value can be reinterpreted as a separate command.
"""

from __future__ import annotations

from typing import Annotated, Any, Mapping, Sequence

from pydantic import BeforeValidator, RootModel

from httpcurl.constants import ALLOWED_CURL_OPTIONS, STANDALONE_VALUES


class RejectedOptionError(ValueError):
    """Raised when a request names a curl flag outside the allow-list."""

    def __init__(self, option: str) -> None:
        super().__init__(f"unauthorized curl option: {option}")
        self.option = option


def _wrap_single(value: Any) -> Any:
    """Collapse the string-or-list union: a lone string becomes a one-element list."""
    if isinstance(value, str):
        return [value]
    return value


CurlValue = Annotated[list[str], BeforeValidator(_wrap_single)]


class CurlOptions(RootModel[dict[str, CurlValue]]):
    """Decoded request body: flag name → ordered list of values.

    Duplicate JSON keys follow last-wins mapping semantics.  Any value that is
    neither a string nor a list of strings fails validation.
    """

    root: dict[str, CurlValue] = {}

    def normalized(self) -> dict[str, list[str]]:
        return {key: list(values) for key, values in self.root.items()}


def sanitize_input(options: Mapping[str, Sequence[str]]) -> list[str]:
    """Validate curl options against the allow-list and build the argument list.

    Each value of an allowed flag emits either the bare flag (value ``""`` or
    ``"true"``) or the flag followed by the value.  A flag's emissions stay
    adjacent and keep the value order; order across different flags follows
    mapping iteration and is not part of the contract.

    Args:
        options: Flag name → values, as produced by ``CurlOptions.normalized()``.

    Returns:
        The argument list, without the leading silent flag.

    Raises:
        RejectedOptionError: On the first flag not in ``ALLOWED_CURL_OPTIONS``.
            No partial argument list is produced.
    """
    args: list[str] = []

    for key, values in options.items():
        if key not in ALLOWED_CURL_OPTIONS:
            raise RejectedOptionError(key)

        for value in values:
            if value in STANDALONE_VALUES:
                args.append(key)
            else:
                args.extend((key, value))

    return args
