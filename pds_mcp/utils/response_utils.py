"""Decoding of Primavera Data Service response bodies.

Success bodies are decoded strictly according to the declared content type:
- `json`: parsed JSON value (a malformed body raises DecodeError)
- `text`: the raw response text, never parsed
- `binary`: the raw response bytes

Failure bodies are decoded leniently: a body declared JSON that does not parse
is kept as raw text so the status code still reaches the caller.
"""
from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from pds_mcp.core.errors import DecodeError

logger = logging.getLogger(__name__)

JSON = "json"
TEXT = "text"
BINARY = "binary"

ACCEPT_HEADERS = {
    JSON: "application/json",
    TEXT: "text/plain",
    BINARY: "application/octet-stream",
}


def accept_header(content_type: str) -> str:
    try:
        return ACCEPT_HEADERS[content_type]
    except KeyError:
        raise ValueError(f"Unknown content type '{content_type}'") from None


def decode_success(response: httpx.Response, content_type: str) -> Any:
    """Return the body of a 2xx response as the declared content type."""
    if content_type == BINARY:
        return response.content
    if content_type == TEXT:
        return response.text
    if content_type == JSON:
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Expected a JSON body from {response.request.url}: {e}") from e
    raise ValueError(f"Unknown content type '{content_type}'")


def decode_failure(response: httpx.Response, content_type: str) -> str:
    """Render the body of a non-2xx response as text for an error message."""
    text = response.text
    if content_type != JSON:
        return text
    try:
        return json.dumps(json.loads(text), ensure_ascii=False)
    except ValueError:
        logger.warning(f"Error body from {response.request.url} is not JSON; using raw text")
        return text
