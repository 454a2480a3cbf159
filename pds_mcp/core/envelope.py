"""The request envelope shared by every Primavera Data Service tool.

An `EndpointDescriptor` declares one remote operation: its path, method,
parameters (and where each one goes) and the content types it answers with.
An `EndpointBinding` pairs a descriptor with credentials and a base URL and
turns a call into exactly one HTTP request and exactly one result: the decoded
payload, or `{"error": "<message>"}`. A binding never raises.
"""
from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from pds_mcp.core.errors import DataServiceError, RemoteError, TransportError, ValidationError
from pds_mcp.utils import accept_header, decode_failure, decode_success, get_endpoint
from pds_mcp.utils.response_utils import JSON

logger = logging.getLogger(__name__)

PATH = "path"
QUERY = "query"
BODY = "body"


@dataclass(frozen=True)
class Param:
    """One argument of an endpoint.

    `name` is the Python keyword the tool accepts, `wire` the name the API
    expects in the path, query string or JSON body.
    """

    name: str
    wire: str
    location: str
    required: bool = False
    default: Any = None
    choices: Optional[Tuple[Any, ...]] = None


@dataclass(frozen=True)
class EndpointDescriptor:
    name: str
    action: str
    method: str
    path: str
    params: Tuple[Param, ...] = ()
    fixed_query: Tuple[Tuple[str, str], ...] = ()
    success_type: str = JSON
    failure_type: str = JSON

    @property
    def has_body(self) -> bool:
        return any(p.location == BODY for p in self.params)


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)

    def authorization_header(self) -> str:
        token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return f"Basic {token}"


@dataclass
class PreparedRequest:
    method: str
    url: str
    params: List[Tuple[str, str]]
    headers: Dict[str, str]
    body: Optional[Dict[str, Any]] = None


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class EndpointBinding:
    """A descriptor bound to credentials, a base URL and a request deadline."""

    def __init__(
        self,
        descriptor: EndpointDescriptor,
        credentials: Credentials,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.descriptor = descriptor
        self.credentials = credentials
        self.base_url = base_url
        self.timeout = timeout
        # Only set by tests; production calls use httpx's default transport.
        self.transport = transport

    def validate(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        """Check arguments against the descriptor and apply defaults.

        Returns the values to send, keyed by Python name. Blank strings count
        as unset; optional parameters still unset after defaults are left out.
        """
        known = {p.name for p in self.descriptor.params}
        unknown = sorted(set(arguments) - known)
        if unknown:
            raise ValidationError(f"Unexpected parameter(s): {', '.join(unknown)}")

        missing = [p.name for p in self.descriptor.params if p.required and _is_missing(arguments.get(p.name))]
        if missing:
            raise ValidationError(f"Missing required parameter(s): {', '.join(missing)}")

        values: Dict[str, Any] = {}
        for p in self.descriptor.params:
            value = arguments.get(p.name)
            if _is_missing(value):
                value = p.default
            if _is_missing(value):
                continue
            if p.choices is not None and value not in p.choices:
                allowed = ", ".join(str(c) for c in p.choices)
                raise ValidationError(f"Invalid value for {p.name}: {value!r} (expected one of {allowed})")
            values[p.name] = value
        return values

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": accept_header(self.descriptor.success_type),
            "Authorization": self.credentials.authorization_header(),
        }
        if self.descriptor.has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def prepare(self, arguments: Mapping[str, Any]) -> PreparedRequest:
        d = self.descriptor
        values = self.validate(arguments)

        path_values = {p.wire: values[p.name] for p in d.params if p.location == PATH and p.name in values}
        try:
            url = get_endpoint(self.base_url, d.path, path_values)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        params = list(d.fixed_query)
        params.extend(
            (p.wire, _query_value(values[p.name])) for p in d.params if p.location == QUERY and p.name in values
        )

        body = None
        if d.has_body:
            body = {p.wire: values[p.name] for p in d.params if p.location == BODY and p.name in values}

        return PreparedRequest(method=d.method, url=url, params=params, headers=self.build_headers(), body=body)

    async def send(self, request: PreparedRequest) -> Any:
        d = self.descriptor
        content = json.dumps(request.body).encode("utf-8") if request.body is not None else None
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.request(
                    request.method,
                    request.url,
                    params=request.params or None,
                    headers=request.headers,
                    content=content,
                )
            except httpx.HTTPError as e:
                raise TransportError(str(e) or e.__class__.__name__) from e

        logger.info(f"{d.name}: {request.method} {response.request.url} -> {response.status_code}")
        if not response.is_success:
            raise RemoteError(response.status_code, decode_failure(response, d.failure_type))
        return decode_success(response, d.success_type)

    async def __call__(self, **arguments: Any) -> Any:
        d = self.descriptor
        try:
            request = self.prepare(arguments)
            return await self.send(request)
        except DataServiceError as e:
            logger.error(f"{d.name} failed: {e}")
            return {"error": f"An error occurred while {d.action}: {e}"}
        except Exception as e:
            logger.exception(f"{d.name} failed unexpectedly")
            return {"error": f"An error occurred while {d.action}: {e}"}
