"""Unit tests for httpcurl/utils/logger.py: request context binding and level handling."""

from __future__ import annotations

import io
import json
import sys
from typing import Iterator

import pytest

from httpcurl.utils.logger import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    current_request_id,
    get_logger,
)


@pytest.fixture()
def log_output(monkeypatch: pytest.MonkeyPatch) -> Iterator[io.StringIO]:
    """Point the JSON renderer at a buffer; restore stdout logging afterwards."""
    buffer = io.StringIO()
    monkeypatch.setattr(sys, "stdout", buffer)
    yield buffer
    clear_request_context()
    monkeypatch.undo()
    configure_logging()


def _lines(buffer: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line]


class TestRequestContext:
    def test_bound_fields_on_every_line(self, log_output: io.StringIO) -> None:
        configure_logging(log_level="INFO", json_output=True)
        bind_request_context("01HZX3JQ6Y5T8V0R6G4N2K9M7B", method="POST", path="/curl")

        logger = get_logger("test_logger")
        logger.info("curl args", curl_args=["-s", "-k"])
        logger.warning("second line")

        lines = _lines(log_output)
        assert len(lines) == 2
        for line in lines:
            assert line["request_id"] == "01HZX3JQ6Y5T8V0R6G4N2K9M7B"
            assert line["method"] == "POST"
            assert line["path"] == "/curl"
            assert "timestamp" in line
        assert lines[0]["event"] == "curl args"
        assert lines[0]["curl_args"] == ["-s", "-k"]
        assert lines[1]["level"] == "warning"

    def test_clear_drops_fields(self, log_output: io.StringIO) -> None:
        configure_logging(log_level="INFO", json_output=True)
        bind_request_context("01HZX3JQ6Y5T8V0R6G4N2K9M7B", method="GET")
        clear_request_context()

        get_logger("test_logger").info("outside a request")

        (line,) = _lines(log_output)
        assert "request_id" not in line
        assert "method" not in line
        assert current_request_id() is None

    def test_rebinding_replaces_previous_request(self, log_output: io.StringIO) -> None:
        bind_request_context("first", method="GET", path="/a")
        bind_request_context("second")
        assert current_request_id() == "second"


class TestLevels:
    def test_level_filters_lower_records(self, log_output: io.StringIO) -> None:
        configure_logging(log_level="warning", json_output=True)
        logger = get_logger("test_logger")
        logger.info("dropped")
        logger.error("kept")

        assert [line["event"] for line in _lines(log_output)] == ["kept"]

    def test_unknown_level_falls_back_to_info(self, log_output: io.StringIO) -> None:
        configure_logging(log_level="VERBOSE", json_output=True)
        logger = get_logger("test_logger")
        logger.debug("dropped")
        logger.info("kept")

        assert [line["event"] for line in _lines(log_output)] == ["kept"]
