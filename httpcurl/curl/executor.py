"""Bounded curl executor.

``run_curl()`` launches curl as a child process with an explicit argument
vector (no shell), merges stdout and stderr into one pipe, and enforces a hard
wall-clock deadline measured from launch.

ATOMIC WRAPPER INVARIANTS:
  - ``run_curl()`` ALWAYS returns an ``ExecutionResult`` for execution failures;
    it never raises for launch errors or timeouts.
  - On deadline expiry the child is killed and reaped before returning.  No
    orphaned curl processes survive a timed-out request.
  - A non-zero exit status is NOT an execution failure.  It is reported as
    ``Outcome.COMPLETED`` with ``returncode`` set; curl's own output explains it.
  - No retries.  Each call moves Idle → Running → exactly one terminal outcome.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from httpcurl.constants import CURL_BINARY, CURL_SILENT_FLAG
from httpcurl.utils.logger import get_logger

logger = get_logger(__name__)

# Read size for draining the merged output pipe.
_READ_CHUNK_BYTES: int = 65_536

TIMEOUT_MESSAGE = "request timed out"


class Outcome(str, Enum):
    """Terminal state of a single curl invocation."""

    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    LAUNCH_FAILED = "launch_failed"


@dataclass(frozen=True)
class ExecutionResult:
    """Result of one bounded curl invocation.

    output:      Combined stdout+stderr bytes.  On TIMED_OUT this holds whatever
                 was read before the kill and is diagnostic only.
    outcome:     Terminal state (see ``Outcome``).
    returncode:  Exit status when COMPLETED, the kill status when TIMED_OUT,
                 None when the process never started.
    error:       Human-readable failure reason; None when COMPLETED.
    duration_ms: Wall-clock time from launch to terminal state.
    pid:         Child process id; None when the process never started.
    """

    output: bytes
    outcome: Outcome
    returncode: Optional[int] = None
    error: Optional[str] = None
    duration_ms: float = 0.0
    pid: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.COMPLETED


async def run_curl(
    args: Sequence[str],
    timeout_s: float,
    *,
    program: str = CURL_BINARY,
) -> ExecutionResult:
    """Run ``program -s <args...>`` with a hard deadline.

    Args:
        args:      Sanitized argument list (see ``sanitize_input()``).
        timeout_s: Deadline in seconds, measured from launch.  A value ``<= 0``
                   is already expired: the program is not launched.
        program:   Executable to launch.  Production always uses curl.

    Returns:
        ExecutionResult. Never raises for launch failures or timeouts.
    """
    argv = [program, CURL_SILENT_FLAG, *args]

    if timeout_s <= 0:
        logger.warning("Curl deadline already expired, not launching", timeout_s=timeout_s)
        return ExecutionResult(output=b"", outcome=Outcome.TIMED_OUT, error=TIMEOUT_MESSAGE)

    t0 = time.perf_counter()
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as exc:
        logger.error(
            "Curl launch failed",
            program=program,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return ExecutionResult(
            output=b"",
            outcome=Outcome.LAUNCH_FAILED,
            error=str(exc),
            duration_ms=_elapsed_ms(t0),
        )

    output = bytearray()

    async def _drain_and_wait() -> int:
        assert proc.stdout is not None
        while True:
            chunk = await proc.stdout.read(_READ_CHUNK_BYTES)
            if not chunk:
                break
            output.extend(chunk)
        return await proc.wait()

    try:
        returncode = await asyncio.wait_for(_drain_and_wait(), timeout=timeout_s)
    except asyncio.TimeoutError:
        killed_status = await _kill_and_reap(proc)
        logger.warning(
            "Curl timed out, process killed",
            pid=proc.pid,
            timeout_s=timeout_s,
            returncode=killed_status,
            output_bytes=len(output),
        )
        return ExecutionResult(
            output=bytes(output),
            outcome=Outcome.TIMED_OUT,
            returncode=killed_status,
            error=TIMEOUT_MESSAGE,
            duration_ms=_elapsed_ms(t0),
            pid=proc.pid,
        )
    except asyncio.CancelledError:
        # Caller went away (client disconnect, shutdown): the child must not outlive it.
        await asyncio.shield(_kill_and_reap(proc))
        raise

    duration_ms = _elapsed_ms(t0)
    logger.debug(
        "Curl completed",
        pid=proc.pid,
        returncode=returncode,
        output_bytes=len(output),
        duration_ms=round(duration_ms, 2),
    )
    return ExecutionResult(
        output=bytes(output),
        outcome=Outcome.COMPLETED,
        returncode=returncode,
        duration_ms=duration_ms,
        pid=proc.pid,
    )


async def _kill_and_reap(proc: asyncio.subprocess.Process) -> int:
    """SIGKILL the child (if still running) and wait until it has been reaped."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass  # exited between the deadline and the kill
    return await proc.wait()


def _elapsed_ms(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000
