from __future__ import annotations

import logging
import os
import sys
from typing import Any, Literal

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from .catalog import QueryEngine, SpecLoadError, call_tool
from .catalog.rules import DEFAULT_TAG_PREFIX

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]


def build_server(engine: QueryEngine) -> FastMCP:
    mcp = FastMCP("api-docs-mcp")

    def respond(name: str, arguments: dict[str, Any]) -> str:
        reply = call_tool(engine, name, arguments)
        if reply.is_error:
            raise ToolError(reply.text)
        return reply.text

    @mcp.tool(name="get_api_overview")
    def get_api_overview() -> str:
        """Overview of the API: base URL, endpoint counts per method and the largest resource groups.
        Use this first to understand the API before exploring specific endpoints."""
        return respond("get_api_overview", {})

    @mcp.tool(name="list_all_endpoints")
    def list_all_endpoints(
        method: HttpMethod | None = None,
        tag: str | None = None,
        limit: int | None = None,
    ) -> str:
        """List endpoints with method, path, summary and tags, optionally filtered by HTTP method
        and resource group (exact tag, e.g. fortnox_Customers)."""
        return respond("list_all_endpoints", {"method": method, "tag": tag, "limit": limit})

    @mcp.tool(name="get_endpoint_details")
    def get_endpoint_details(path: str, method: HttpMethod, expand_refs: bool = False) -> str:
        """Full documentation for one endpoint: parameters, request body and response schemas.
        The path must match list_all_endpoints exactly, e.g. /3/invoices/{DocumentNumber}."""
        return respond(
            "get_endpoint_details", {"path": path, "method": method, "expand_refs": expand_refs}
        )

    @mcp.tool(name="get_endpoints_by_resource")
    def get_endpoints_by_resource(resource: str) -> str:
        """All endpoints of a resource (e.g. Customers, Invoices) grouped into list, get, create,
        update and delete operations."""
        return respond("get_endpoints_by_resource", {"resource": resource})

    @mcp.tool(name="search_endpoints")
    def search_endpoints(keyword: str, limit: int = 20) -> str:
        """Search endpoints by keyword in path, summary, description, operationId and tags.
        Results keep the document order."""
        return respond("search_endpoints", {"keyword": keyword, "limit": limit})

    @mcp.tool(name="list_resource_groups")
    def list_resource_groups() -> str:
        """List every resource group with endpoint counts, grouped by business category."""
        return respond("list_resource_groups", {})

    @mcp.tool(name="get_schema_details")
    def get_schema_details(schemaName: str) -> str:  # noqa: N803 - public tool argument name
        """Definition of a named data model from components.schemas (e.g. fortnox_Customer)."""
        return respond("get_schema_details", {"schemaName": schemaName})

    return mcp


def _print_banner(engine: QueryEngine) -> None:
    sys.stderr.write("API documentation server started\n")
    sys.stderr.write(f"Loaded {len(engine.index)} endpoints from {engine.document.title or 'OpenAPI spec'}\n")
    sys.stderr.write("Providing documentation and endpoint information only (no API calls)\n")
    sys.stderr.flush()


def main() -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    source = os.getenv("OPENAPI_SPEC_PATH", "./openapi.json")
    try:
        engine = QueryEngine.from_source(
            source,
            tag_prefix=os.getenv("OPENAPI_TAG_PREFIX", DEFAULT_TAG_PREFIX),
            validate=os.getenv("OPENAPI_VALIDATE", "0") == "1",
        )
    except SpecLoadError as exc:
        logger.error("Failed to load API description from %s: %s", source, exc)
        sys.exit(1)

    mcp = build_server(engine)
    _print_banner(engine)
    mode = os.getenv("MCP_TRANSPORT", "stdio")
    if mode == "http":
        mcp.run(
            transport="http",
            host=os.getenv("MCP_HOST", "0.0.0.0"),  # nosec B104
            port=int(os.getenv("PORT", "8000")),
        )
    else:
        mcp.run()


if __name__ == "__main__":
    main()
