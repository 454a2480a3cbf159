from typing import Any

import httpx

from pds_mcp.core.config import Settings
from pds_mcp.core.envelope import PATH, QUERY, EndpointDescriptor, Param
from pds_mcp.tools import make_binding
from pds_mcp.utils.response_utils import TEXT

CONFIG_CODE = Param("config_code", "configCode", QUERY, required=True)

GET_TABLES_METADATA = EndpointDescriptor(
    name="get_tables_metadata",
    action="fetching tables metadata",
    method="GET",
    path="/dataservice/metadata/tables",
    params=(CONFIG_CODE,),
)

GET_COLUMNS_METADATA = EndpointDescriptor(
    name="get_columns_metadata",
    action="fetching columns metadata",
    method="GET",
    path="/dataservice/metadata/columns/{tableName}",
    params=(Param("table_name", "tableName", PATH, required=True), CONFIG_CODE),
)

SYNC_METADATA = EndpointDescriptor(
    name="sync_metadata",
    action="syncing metadata",
    method="POST",
    path="/dataservice/metadata/refresh",
    params=(CONFIG_CODE,),
)

VIEW_METADATA_SEED_STATUS = EndpointDescriptor(
    name="view_metadata_seed_status",
    action="viewing metadata seed status",
    method="GET",
    path="/v1/config/status/seed",
    params=(CONFIG_CODE,),
    success_type=TEXT,
    failure_type=TEXT,
)


def get_tools(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> dict[str, Any]:
    tables = make_binding(GET_TABLES_METADATA, settings, transport)
    columns = make_binding(GET_COLUMNS_METADATA, settings, transport)
    sync = make_binding(SYNC_METADATA, settings, transport)
    seed = make_binding(VIEW_METADATA_SEED_STATUS, settings, transport)

    async def get_tables_metadata(config_code: str) -> Any:
        """Fetch the tables metadata of a configuration.

        Args:
            config_code: The configuration name.
        """
        return await tables(config_code=config_code)

    async def get_columns_metadata(table_name: str, config_code: str) -> Any:
        """Fetch the columns metadata of one table.

        Args:
            table_name: The name of the table to fetch metadata for.
            config_code: The configuration name.
        """
        return await columns(table_name=table_name, config_code=config_code)

    async def sync_metadata(config_code: str) -> Any:
        """Refresh the P6/Unifier metadata held by the data service for a configuration."""
        return await sync(config_code=config_code)

    async def view_metadata_seed_status(config_code: str) -> Any:
        """Return the metadata seed status of a configuration as plain text."""
        return await seed(config_code=config_code)

    return {
        "get_tables_metadata": {
            "func": get_tables_metadata,
            "title": "Get tables metadata",
            "description": "Fetch tables metadata for the specified configuration name.",
        },
        "get_columns_metadata": {
            "func": get_columns_metadata,
            "title": "Get columns metadata",
            "description": "Fetch columns metadata of a specified table.",
        },
        "sync_metadata": {
            "func": sync_metadata,
            "title": "Sync metadata",
            "description": "Sync P6/Unifier metadata with the Primavera Data Service.",
        },
        "view_metadata_seed_status": {
            "func": view_metadata_seed_status,
            "title": "View metadata seed status",
            "description": "View the metadata seed status of a configuration in the Primavera Data Service.",
        },
    }
