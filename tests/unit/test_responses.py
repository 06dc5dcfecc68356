"""Unit tests for httpcurl/models/responses.py: POST /curl response shapes.

Covers:
  - 400 client error body
  - 500 execution error body with details
  - 200 result body (UTF-8 text, invalid bytes replaced)
  - base64 formatting round-trips the raw bytes
  - plain response echoes Accept, falls back to application/octet-stream
  - 400 and 500 builders are never confused
"""

from __future__ import annotations

import base64
import json

import pytest

from httpcurl.curl.executor import TIMEOUT_MESSAGE, ExecutionResult, Outcome
from httpcurl.models.responses import (
    build_client_error_response,
    build_execution_error_response,
    build_plain_response,
    build_result_response,
    decode_output,
    format_output,
)


class TestClientErrorResponse:
    def test_status_and_body(self) -> None:
        response = build_client_error_response("unauthorized curl option: -F")
        assert response.status_code == 400
        assert json.loads(response.body) == {"error": "unauthorized curl option: -F"}


class TestExecutionErrorResponse:
    def test_timeout(self) -> None:
        result = ExecutionResult(
            output=b"partial", outcome=Outcome.TIMED_OUT, error=TIMEOUT_MESSAGE
        )
        response = build_execution_error_response(result)
        assert response.status_code == 500
        assert json.loads(response.body) == {
            "error": "Error executing curl command: request timed out",
            "details": "partial",
        }

    def test_launch_failure(self) -> None:
        result = ExecutionResult(
            output=b"",
            outcome=Outcome.LAUNCH_FAILED,
            error="[Errno 2] No such file or directory: 'curl'",
        )
        response = build_execution_error_response(result)
        body = json.loads(response.body)
        assert response.status_code == 500
        assert body["error"].startswith("Error executing curl command: ")
        assert "No such file" in body["error"]
        assert body["details"] == ""


class TestResultResponse:
    def test_text_output(self) -> None:
        response = build_result_response(b'{"hello": "world"}')
        assert response.status_code == 200
        assert json.loads(response.body) == {"result": '{"hello": "world"}'}

    def test_invalid_utf8_replaced(self) -> None:
        assert decode_output(b"ok\xff") == "ok�"

    def test_base64_payload(self) -> None:
        raw = bytes(range(256))
        response = build_result_response(format_output(raw, as_base64=True))
        result = json.loads(response.body)["result"]
        assert base64.b64decode(result) == raw

    @pytest.mark.parametrize("raw", [b"", b"a", b"\x00\xff\x10", "héllo ✓".encode()])
    def test_base64_round_trip(self, raw: bytes) -> None:
        assert base64.b64decode(format_output(raw, as_base64=True)) == raw

    def test_format_output_passthrough(self) -> None:
        assert format_output(b"raw", as_base64=False) == b"raw"


class TestPlainResponse:
    def test_accept_echoed(self) -> None:
        response = build_plain_response(b"<html></html>", "text/html")
        assert response.status_code == 200
        assert response.body == b"<html></html>"
        assert response.headers["content-type"] == "text/html"

    @pytest.mark.parametrize("accept", ["text/plain", "text/csv; charset=latin-1", "application/xml"])
    def test_accept_echoed_verbatim(self, accept: str) -> None:
        response = build_plain_response(b"payload", accept)
        assert response.headers["content-type"] == accept

    def test_missing_accept_defaults_to_octet_stream(self) -> None:
        response = build_plain_response(b"\x00\x01", None)
        assert response.headers["content-type"] == "application/octet-stream"
        assert response.body == b"\x00\x01"
