"""Curl core: option sanitization and bounded execution.

Public API:
    CurlOptions         — request body model (flag → string or list of strings)
    RejectedOptionError — raised for flags outside the allow-list
    sanitize_input      — options → argument list
    run_curl            — bounded subprocess execution
    ExecutionResult     — classified execution outcome
    Outcome             — COMPLETED | TIMED_OUT | LAUNCH_FAILED
    http_curl           — sanitize + log + execute
"""
from httpcurl.curl.executor import ExecutionResult, Outcome, run_curl
from httpcurl.curl.options import CurlOptions, RejectedOptionError, sanitize_input
from httpcurl.curl.service import http_curl

__all__ = [
    "CurlOptions",
    "ExecutionResult",
    "Outcome",
    "RejectedOptionError",
    "http_curl",
    "run_curl",
    "sanitize_input",
]
