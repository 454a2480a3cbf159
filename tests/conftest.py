from __future__ import annotations

import base64
from typing import Any, Callable

import httpx
import pytest

from pds_mcp.core.config import Settings
from pds_mcp.core.envelope import Credentials
from pds_mcp.tools import jobs, metadata, query

BASE_URL = "https://pds.example.com/metrolinx/pds/rest-service"

TOOL_MODULES = (jobs, metadata, query)

TABLES = [{"name": "ACTIVITY", "columns": ["activity_id"]}]

# Smallest valid call for every tool.
VALID_ARGS: dict[str, dict[str, Any]] = {
    "download_job_data": {"job_id": "J-1001"},
    "get_columns_metadata": {"table_name": "ACTIVITY", "config_code": "ds_p6reportuser"},
    "get_tables_metadata": {"config_code": "ds_p6reportuser"},
    "query_tables_data": {"tables": TABLES},
    "query_tables_data_with_binds": {"tables": TABLES, "binds": {"projectId": 4711}},
    "sync_metadata": {"config_code": "ds_p6reportuser"},
    "view_job_status": {"job_ids": ["J-1001"], "job_type": "EXPORT_DATA", "job_status": "COMPLETED_WITH_WARNINGS"},
    "view_metadata_seed_status": {"config_code": "ds_p6reportuser"},
}

REQUIRED_ARGS: dict[str, tuple[str, ...]] = {
    "download_job_data": ("job_id",),
    "get_columns_metadata": ("table_name", "config_code"),
    "get_tables_metadata": ("config_code",),
    "query_tables_data": ("tables",),
    "query_tables_data_with_binds": ("tables", "binds"),
    "sync_metadata": ("config_code",),
    "view_job_status": ("job_ids", "job_type", "job_status"),
    "view_metadata_seed_status": ("config_code",),
}

SUCCESS_KIND = {name: "json" for name in VALID_ARGS}
SUCCESS_KIND["download_job_data"] = "binary"
SUCCESS_KIND["view_metadata_seed_status"] = "text"

TOOL_NAMES = sorted(VALID_ARGS)


def username_for(name: str) -> str:
    return f"{name}-user"


def password_for(name: str) -> str:
    return f"{name}-secret"


def expected_authorization(name: str) -> str:
    token = base64.b64encode(f"{username_for(name)}:{password_for(name)}".encode()).decode()
    return f"Basic {token}"


class Recorder:
    """Mock transport handler that remembers every request it answers."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response] | None = None):
        self.requests: list[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200, json={}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def make_settings() -> Settings:
    creds = {name: Credentials(username_for(name), password_for(name)) for name in TOOL_NAMES}
    return Settings(base_url=BASE_URL, timeout=5.0, credentials=creds)


def build_tools(recorder: Recorder) -> dict[str, Callable]:
    settings = make_settings()
    transport = recorder.transport
    tools = {}
    for module in TOOL_MODULES:
        for name, meta in module.get_tools(settings, transport).items():
            tools[name] = meta["func"]
    return tools


@pytest.fixture
def settings() -> Settings:
    return make_settings()
