"""sanitize → (log) → execute: the single entry point route handlers call."""

from __future__ import annotations

from typing import Mapping, Sequence

from httpcurl.constants import CURL_BINARY, CURL_SILENT_FLAG
from httpcurl.curl.executor import ExecutionResult, run_curl
from httpcurl.curl.options import sanitize_input
from httpcurl.utils.logger import get_logger

logger = get_logger(__name__)


async def http_curl(
    options: Mapping[str, Sequence[str]],
    timeout_s: float,
    *,
    print_args: bool = True,
    program: str = CURL_BINARY,
) -> ExecutionResult:
    """Sanitize ``options`` and run curl with them under ``timeout_s``.

    Args:
        options:    Normalized flag → values mapping.
        timeout_s:  Hard deadline for the child process, in seconds.
        print_args: Log the full argument vector (``Config.curl.print_args``).
        program:    Curl executable (``Config.curl.binary``).

    Raises:
        RejectedOptionError: A flag is not allow-listed.  Nothing is launched.
    """
    curl_args = sanitize_input(options)

    if print_args:
        logger.info("curl args", curl_args=[CURL_SILENT_FLAG, *curl_args])

    return await run_curl(curl_args, timeout_s, program=program)
