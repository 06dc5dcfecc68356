"""POST /curl — run curl with allow-listed options from a JSON body.

Request:
    POST /curl?timeout=5s&base64=true&plain=true
    Content-Type: application/json

    {"-X": "POST", "-d": "hello", "-H": ["A: 1", "B: 2"]}

Status mapping:
    400 — wrong Content-Type, unparsable ?timeout=, undecodable body,
          flag outside the allow-list (curl is never launched)
    500 — curl could not be launched, or exceeded its deadline
    200 — curl exited (any status); see httpcurl/models/responses.py for shapes
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request, Response
from pydantic import ValidationError

from httpcurl.config import Config
from httpcurl.constants import JSON_MEDIA_TYPE
from httpcurl.curl import CurlOptions, RejectedOptionError, http_curl
from httpcurl.models.responses import (
    build_client_error_response,
    build_execution_error_response,
    build_plain_response,
    build_result_response,
    format_output,
)
from httpcurl.utils.duration import DurationParseError, parse_duration
from httpcurl.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["curl"])


def _is_json_request(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == JSON_MEDIA_TYPE


@router.post("/curl")
async def handle_curl(
    request: Request,
    timeout: Optional[str] = None,
    base64: Optional[str] = None,
    plain: Optional[str] = None,
) -> Response:
    """Translate the JSON body into curl flags, run curl, and return its output."""
    config: Config = request.app.state.config

    if not _is_json_request(request):
        return build_client_error_response("Content-Type must be application/json")

    timeout_s = config.curl.default_timeout_s
    if timeout:
        try:
            timeout_s = parse_duration(timeout)
        except DurationParseError:
            return build_client_error_response("Error parsing timeout duration")

    body = await request.body()
    try:
        options = CurlOptions.model_validate_json(body) if body.strip() else CurlOptions()
    except ValidationError as exc:
        logger.info("Invalid curl request body", errors=exc.error_count())
        return build_client_error_response("Invalid JSON input")

    try:
        result = await http_curl(
            options.normalized(),
            timeout_s,
            print_args=config.curl.print_args,
            program=config.curl.binary,
        )
    except RejectedOptionError as exc:
        logger.info("Curl option rejected", option=exc.option)
        return build_client_error_response(str(exc))

    if not result.ok:
        return build_execution_error_response(result)

    payload = format_output(result.output, as_base64=base64 == "true")

    if plain == "true":
        return build_plain_response(payload, request.headers.get("accept"))

    return build_result_response(payload)
