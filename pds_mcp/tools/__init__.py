# tools package for the Primavera Data Service MCP server
# Modules in this package expose `get_tools(settings, transport=None) -> dict[str, dict]`
# mapping tool name -> {"func", "title", "description"}.
# The server imports every module here that does not start with "_" and registers the returned callables.
from typing import Optional

import httpx

from pds_mcp.core.config import Settings
from pds_mcp.core.envelope import EndpointBinding, EndpointDescriptor


def make_binding(
    descriptor: EndpointDescriptor,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> EndpointBinding:
    """Bind a descriptor to the credentials configured under its own name."""
    return EndpointBinding(
        descriptor,
        settings.credentials_for(descriptor.name),
        settings.base_url,
        timeout=settings.timeout,
        transport=transport,
    )


__all__ = ["make_binding"]
