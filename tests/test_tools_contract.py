"""Behaviour every Primavera Data Service tool shares."""
from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from conftest import (
    REQUIRED_ARGS,
    SUCCESS_KIND,
    TOOL_NAMES,
    VALID_ARGS,
    Recorder,
    build_tools,
    expected_authorization,
)

SUCCESS_RESPONSES = {
    "json": (lambda: httpx.Response(200, json={"items": [{"id": 1}], "count": 1}), {"items": [{"id": 1}], "count": 1}),
    "text": (lambda: httpx.Response(200, text="SEEDED"), "SEEDED"),
    "binary": (lambda: httpx.Response(200, content=b"PK\x03\x04\x00\xff\xfe"), b"PK\x03\x04\x00\xff\xfe"),
}

ACCEPT = {"json": "application/json", "text": "text/plain", "binary": "application/octet-stream"}


def call(tool_name: str, recorder: Recorder, **overrides):
    tools = build_tools(recorder)
    kwargs = {**VALID_ARGS[tool_name], **overrides}
    return asyncio.run(tools[tool_name](**kwargs))


def test_all_tools_are_exposed() -> None:
    tools = build_tools(Recorder())
    assert sorted(tools) == TOOL_NAMES


@pytest.mark.parametrize(
    "tool_name,param",
    [(name, param) for name in TOOL_NAMES for param in REQUIRED_ARGS[name]],
)
@pytest.mark.parametrize("missing", [None, ""])
def test_missing_required_parameter_sends_nothing(tool_name: str, param: str, missing) -> None:
    recorder = Recorder()
    result = call(tool_name, recorder, **{param: missing})
    assert isinstance(result, dict)
    assert param in result["error"]
    assert "Missing required parameter" in result["error"]
    assert recorder.requests == []


@pytest.mark.parametrize("tool_name", TOOL_NAMES)
def test_success_returns_decoded_body(tool_name: str) -> None:
    make_response, expected = SUCCESS_RESPONSES[SUCCESS_KIND[tool_name]]
    recorder = Recorder(lambda request: make_response())
    result = call(tool_name, recorder)
    assert result == expected
    assert type(result) is type(expected)
    assert len(recorder.requests) == 1


@pytest.mark.parametrize("tool_name", TOOL_NAMES)
def test_http_failure_embeds_status_and_body(tool_name: str) -> None:
    recorder = Recorder(lambda request: httpx.Response(500, content=b'{"message": "backend unavailable"}'))
    result = call(tool_name, recorder)
    assert set(result) == {"error"}
    assert "500" in result["error"]
    assert "backend unavailable" in result["error"]


@pytest.mark.parametrize("tool_name", TOOL_NAMES)
def test_connection_failure_becomes_error(tool_name: str) -> None:
    def reset(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection reset by peer", request=request)

    result = call(tool_name, Recorder(reset))
    assert set(result) == {"error"}
    assert "connection reset by peer" in result["error"]


@pytest.mark.parametrize("tool_name", TOOL_NAMES)
def test_timeout_becomes_error(tool_name: str) -> None:
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    result = call(tool_name, Recorder(slow))
    assert "timed out" in result["error"]


@pytest.mark.parametrize("tool_name", TOOL_NAMES)
def test_authorization_uses_the_tools_own_credentials(tool_name: str) -> None:
    recorder = Recorder(lambda request: SUCCESS_RESPONSES[SUCCESS_KIND[tool_name]][0]())
    call(tool_name, recorder)
    (request,) = recorder.requests
    assert request.headers["Authorization"] == expected_authorization(tool_name)
    assert request.headers.get_list("Authorization") == [expected_authorization(tool_name)]


@pytest.mark.parametrize("tool_name", TOOL_NAMES)
def test_accept_header_matches_success_type(tool_name: str) -> None:
    recorder = Recorder(lambda request: SUCCESS_RESPONSES[SUCCESS_KIND[tool_name]][0]())
    call(tool_name, recorder)
    (request,) = recorder.requests
    assert request.headers["Accept"] == ACCEPT[SUCCESS_KIND[tool_name]]


@pytest.mark.parametrize("tool_name", [n for n in TOOL_NAMES if SUCCESS_KIND[n] == "json"])
def test_malformed_json_success_body_becomes_error(tool_name: str) -> None:
    recorder = Recorder(lambda request: httpx.Response(200, content=b"<html>not json</html>"))
    result = call(tool_name, recorder)
    assert set(result) == {"error"}
    assert "JSON" in result["error"]


@pytest.mark.parametrize("tool_name", TOOL_NAMES)
def test_body_only_sent_with_content_type(tool_name: str) -> None:
    recorder = Recorder(lambda request: SUCCESS_RESPONSES[SUCCESS_KIND[tool_name]][0]())
    call(tool_name, recorder)
    (request,) = recorder.requests
    if request.content:
        assert request.headers["Content-Type"] == "application/json"
        assert isinstance(json.loads(request.content), dict)
    else:
        assert "Content-Type" not in request.headers


def test_concurrent_calls_are_independent() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/metadata/tables"):
            return httpx.Response(200, json={"tables": ["ACTIVITY"]})
        return httpx.Response(404, text="unknown seed")

    recorder = Recorder(handler)
    tools = build_tools(recorder)

    async def both():
        return await asyncio.gather(
            tools["get_tables_metadata"](config_code="ds_p6reportuser"),
            tools["view_metadata_seed_status"](config_code="ds_p6reportuser"),
        )

    tables, seed = asyncio.run(both())
    assert tables == {"tables": ["ACTIVITY"]}
    assert "404" in seed["error"] and "unknown seed" in seed["error"]
    assert len(recorder.requests) == 2
