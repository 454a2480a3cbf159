from typing import Any

import httpx

from pds_mcp.core.config import Settings
from pds_mcp.core.envelope import BODY, EndpointDescriptor, Param
from pds_mcp.tools import make_binding

QUERY_MODES = ("SYNC", "ASYNC")

QUERY_TABLES_DATA = EndpointDescriptor(
    name="query_tables_data",
    action="querying tables data",
    method="POST",
    path="/dataservice/runquery",
    fixed_query=(("configCode", "ds_p6reportuser"),),
    params=(
        Param("name", "name", BODY, default="Data Query"),
        Param("tables", "tables", BODY, required=True),
        Param("since_date", "sinceDate", BODY),
        Param("sql_queries_and_total_record_count", "sqlQueriesAndTotalRecordCount", BODY, default=True),
        Param("page_size", "pageSize", BODY),
        Param("next_table_name", "nextTableName", BODY),
        Param("next_key", "nextKey", BODY),
        Param("original_date_format", "originalDateFormat", BODY),
        Param("mode", "mode", BODY, default="SYNC", choices=QUERY_MODES),
    ),
)

QUERY_TABLES_DATA_WITH_BINDS = EndpointDescriptor(
    name="query_tables_data_with_binds",
    action="querying tables data with bind variables",
    method="POST",
    path="/dataservice/runquery",
    fixed_query=(("configCode", "ds_p6adminuser"),),
    params=(
        Param("tables", "tables", BODY, required=True),
        Param("binds", "binds", BODY, required=True),
    ),
)


def get_tools(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> dict[str, Any]:
    report_query = make_binding(QUERY_TABLES_DATA, settings, transport)
    admin_query = make_binding(QUERY_TABLES_DATA_WITH_BINDS, settings, transport)

    async def query_tables_data(
        tables: list[dict[str, Any]],
        name: str | None = None,
        since_date: str | None = None,
        sql_queries_and_total_record_count: bool = True,
        page_size: str | None = None,
        next_table_name: str | None = None,
        next_key: str | None = None,
        original_date_format: bool | None = None,
        mode: str = "SYNC",
    ) -> Any:
        """Query tables data as the reporting user.

        Args:
            tables: Tables to query, each with its name, columns, conditions and orderByColumns.
            name: Name/description for this query, e.g. "Activity Data". Defaults to "Data Query".
            since_date: Only return data changed since this date (DD-MON-YYYY HH24:MI:SS).
            sql_queries_and_total_record_count: Include SQL queries and total record count in the response.
            page_size: Page size for pagination.
            next_table_name: Table to resume from, as returned by the previous page.
            next_key: Key to resume from, as returned by the previous page.
            original_date_format: Return dates in their original format.
            mode: SYNC or ASYNC.
        """
        return await report_query(
            tables=tables,
            name=name,
            since_date=since_date,
            sql_queries_and_total_record_count=sql_queries_and_total_record_count,
            page_size=page_size,
            next_table_name=next_table_name,
            next_key=next_key,
            original_date_format=original_date_format,
            mode=mode,
        )

    async def query_tables_data_with_binds(tables: list[dict[str, Any]], binds: dict[str, Any]) -> Any:
        """Query tables data as the admin user, with bind variables referenced by the table conditions."""
        return await admin_query(tables=tables, binds=binds)

    return {
        "query_tables_data": {
            "func": query_tables_data,
            "title": "Query tables data",
            "description": "Query tables data from the Primavera Data Service.",
        },
        "query_tables_data_with_binds": {
            "func": query_tables_data_with_binds,
            "title": "Query tables data with bind variables",
            "description": "Query tables data from the Primavera Data Service using bind variables (admin configuration).",
        },
    }
