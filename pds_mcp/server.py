from pds_mcp.core.logging_config import setup_logging, get_logger
from pds_mcp.core.config import Settings, load_settings
from mcp.server.fastmcp import FastMCP
from dotenv import load_dotenv
from importlib import import_module
from typing import Any, Optional
import pkgutil
import inspect
import functools
import base64
import sys

import httpx

import pds_mcp.tools

logger = get_logger(__name__)

SERVER_NAME = "primavera-data-service"
TOOLS_PACKAGE = pds_mcp.tools.__name__


def to_mcp_result(result: Any) -> Any:
    """MCP tool results are text; binary payloads travel base64 encoded."""
    if isinstance(result, (bytes, bytearray)):
        return {"content_base64": base64.b64encode(result).decode("ascii"), "size": len(result)}
    return result


def make_wrapper(_func):
    @functools.wraps(_func)
    async def _wrapped(*call_args, **call_kwargs):
        return to_mcp_result(await _func(*call_args, **call_kwargs))

    # Keep the parameter schema, drop the return annotation so results are not validated as structured output
    orig_sig = inspect.signature(_func)
    _wrapped.__signature__ = orig_sig.replace(return_annotation=inspect.Signature.empty)
    _wrapped.__annotations__ = {k: v for k, v in _func.__annotations__.items() if k != "return"}
    return _wrapped


def register_tools(
    mcp: FastMCP,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[str]:
    """Import every module of the tools package and register what its get_tools() returns."""
    registered_tool_names: list[str] = []
    for finder, name, ispkg in pkgutil.iter_modules(pds_mcp.tools.__path__):
        if name.startswith("_"):
            continue
        module_name = f"{TOOLS_PACKAGE}.{name}"
        try:
            mod = import_module(module_name)
        except Exception:
            logger.exception(f"Failed to load tools from module {module_name}")
            continue
        if not hasattr(mod, "get_tools"):
            continue
        logger.info(f"Imported tools module: {module_name}")

        # mapping: tool_name -> { 'func': callable, 'title': str, 'description': str }
        mapping = mod.get_tools(settings, transport)
        for tool_name, meta in mapping.items():
            func = meta.get("func")
            if not func:
                logger.warning(f"Tool {tool_name} in {module_name} did not provide a callable; skipping")
                continue
            try:
                mcp.add_tool(
                    make_wrapper(func),
                    name=tool_name,
                    title=meta.get("title"),
                    description=meta.get("description"),
                )
                logger.info(f"Added tool via add_tool: {tool_name} (title={meta.get('title')}) from {module_name}")
                registered_tool_names.append(tool_name)
            except Exception:
                logger.exception(f"Failed to register tool {tool_name} from {module_name}")
    return registered_tool_names


def create_server(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    if settings is None:
        settings = load_settings()
    mcp = FastMCP(SERVER_NAME)
    logger.info(f"MCP server instance created for {settings.base_url}")

    logger.info("Loading MCP tools...")
    names = register_tools(mcp, settings, transport)
    logger.info(f"Total tools registered: {len(names)} , tool names: {names}")
    return mcp


def main() -> None:
    load_dotenv()  # Loads credential variables from .env into the environment
    settings = load_settings()
    setup_logging(settings.log_dir)
    logger.info("MCP server bootstrap starting.")

    mcp = create_server(settings)
    logger.info("Starting MCP server...")
    try:
        mcp.run(transport="stdio")
        logger.info("MCP server shut down.")
    except Exception:
        logger.exception("Unhandled exception running MCP server")
        print("Unhandled exception occurred. See the server log for details.", file=sys.stderr)
        sys.exit(-1)


if __name__ == "__main__":
    main()
