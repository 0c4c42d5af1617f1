from __future__ import annotations

import asyncio

import pytest
from fastmcp import Client

from api_docs_mcp.catalog.dispatch import TOOLS, call_tool
from api_docs_mcp.catalog.engine import QueryEngine
from api_docs_mcp.server import build_server

from .conftest import make_engine

TOOL_NAMES = [
    "get_api_overview",
    "list_all_endpoints",
    "get_endpoint_details",
    "get_endpoints_by_resource",
    "search_endpoints",
    "list_resource_groups",
    "get_schema_details",
]


def test_tool_table() -> None:
    assert list(TOOLS) == TOOL_NAMES


def test_unknown_tool(engine: QueryEngine) -> None:
    reply = call_tool(engine, "delete_everything", {})
    assert reply.is_error
    assert reply.text == "Unknown tool: delete_everything"


@pytest.mark.parametrize(
    "name,arguments,missing",
    [
        ("get_endpoint_details", {"path": "/3/customers"}, "method"),
        ("get_endpoint_details", {}, "path, method"),
        ("get_endpoints_by_resource", {}, "resource"),
        ("search_endpoints", {"limit": 5}, "keyword"),
        ("get_schema_details", None, "schemaName"),
    ],
)
def test_missing_required_arguments(engine: QueryEngine, name, arguments, missing) -> None:
    reply = call_tool(engine, name, arguments)
    assert reply.is_error
    assert reply.text == f"Missing required argument: {missing}"


def test_overview_text(engine: QueryEngine) -> None:
    reply = call_tool(engine, "get_api_overview")
    assert not reply.is_error
    assert "# Fortnox API Overview" in reply.text
    assert "- **Base URL**: https://api.fortnox.se" in reply.text
    assert "- GET: 9 endpoints" in reply.text
    assert "- fortnox_Customers: 5 endpoints" in reply.text


def test_list_text_reports_truncation(engine: QueryEngine) -> None:
    reply = call_tool(engine, "list_all_endpoints", {"method": "GET", "limit": 2})
    assert "**Total Found**: 9 GET endpoints" in reply.text
    assert "**Showing**: 2 endpoints (limited to 2)" in reply.text
    assert "7 additional endpoints not shown" in reply.text


def test_list_text_ignores_empty_filters(engine: QueryEngine) -> None:
    reply = call_tool(engine, "list_all_endpoints", {"method": "", "tag": ""})
    assert not reply.is_error
    assert "**Total Found**: 15 endpoints" in reply.text


@pytest.mark.parametrize("arguments", [{"method": 5}, {"tag": ["fortnox_Customers"]}])
def test_list_wrong_shape_arguments_are_errors(engine: QueryEngine, arguments) -> None:
    reply = call_tool(engine, "list_all_endpoints", arguments)
    assert reply.is_error
    assert reply.text.startswith("Invalid ")


def test_details_rejects_non_boolean_expand_refs(engine: QueryEngine) -> None:
    reply = call_tool(
        engine,
        "get_endpoint_details",
        {"path": "/3/customers", "method": "POST", "expand_refs": "false"},
    )
    assert reply.is_error
    assert reply.text.startswith("Invalid expand_refs")


def test_details_null_expand_refs_means_verbatim(engine: QueryEngine) -> None:
    reply = call_tool(
        engine,
        "get_endpoint_details",
        {"path": "/3/customers", "method": "POST", "expand_refs": None},
    )
    assert not reply.is_error
    assert '"$ref": "#/components/schemas/CustomerWrap"' in reply.text


def test_details_text(engine: QueryEngine) -> None:
    reply = call_tool(engine, "get_endpoint_details", {"path": "/3/customers", "method": "get"})
    assert not reply.is_error
    text = reply.text
    assert text.startswith("# GET /3/customers\n")
    assert "- **Operation ID**: list_CustomersResource" in text
    assert "### Path Parameters\nNone" in text
    assert "- **filter** (string) *optional*" in text
    assert "  - Allowed values: active, inactive" in text
    assert "  - Min: 1" in text
    assert "  - Max: 500" in text
    assert "## Request Body\nNot applicable for this endpoint." in text
    assert '"$ref": "#/components/schemas/Customer"' in text
    assert "- **Full URL**: https://api.fortnox.se/3/customers" in text


def test_details_text_expanded(engine: QueryEngine) -> None:
    reply = call_tool(
        engine,
        "get_endpoint_details",
        {"path": "/3/customers", "method": "POST", "expand_refs": True},
    )
    assert '"$ref"' not in reply.text
    assert '"CustomerNumber"' in reply.text


def test_details_not_found_text(engine: QueryEngine) -> None:
    reply = call_tool(engine, "get_endpoint_details", {"path": "/3/nope", "method": "get"})
    assert reply.is_error
    assert reply.text.startswith("Endpoint not found: GET /3/nope")


def test_resource_text(engine: QueryEngine) -> None:
    reply = call_tool(engine, "get_endpoints_by_resource", {"resource": "Customers"})
    text = reply.text
    assert "**Total Endpoints**: 5" in text
    assert "- **List/Search**: 1 endpoints" in text
    assert "## Delete Operations" in text


def test_resource_text_skips_empty_buckets(engine: QueryEngine) -> None:
    reply = call_tool(engine, "get_endpoints_by_resource", {"resource": "Payments"})
    assert "## Get Single Resource" in reply.text
    assert "## Create Operations" not in reply.text


def test_search_text(engine: QueryEngine) -> None:
    reply = call_tool(engine, "search_endpoints", {"keyword": "archived"})
    assert '# Search Results for "archived"' in reply.text
    assert "## 1. GET /3/articles" in reply.text
    # long descriptions are cut at 150 characters
    assert "- **Description**: " in reply.text
    assert "...\n" in reply.text


def test_search_text_no_match(engine: QueryEngine) -> None:
    reply = call_tool(engine, "search_endpoints", {"keyword": "zebra"})
    assert not reply.is_error
    assert reply.text.startswith('No endpoints found matching "zebra"')


def test_search_uses_default_limit_when_absent() -> None:
    engine = make_engine({f"/t/{i}": {"get": {"operationId": f"t{i}"}} for i in range(22)})
    reply = call_tool(engine, "search_endpoints", {"keyword": "/t/"})
    assert "**Showing**: 20 endpoints" in reply.text
    assert "2 additional results not shown" in reply.text


def test_resource_groups_text(engine: QueryEngine) -> None:
    text = call_tool(engine, "list_resource_groups").text
    assert "**Total Resource Groups**: 8" in text
    assert "### Financial\n- Invoices (2 endpoints)\n- Payments (1 endpoints)" in text
    assert "- **Articles**: 2 endpoints" in text
    assert "'fortnox_' prefix" in text


def test_schema_text(engine: QueryEngine) -> None:
    reply = call_tool(engine, "get_schema_details", {"schemaName": "Invoice"})
    assert reply.text.startswith("# Schema: Invoice\n\nAn invoice\n")
    assert '"DocumentNumber"' in reply.text


def test_schema_not_found_text(engine: QueryEngine) -> None:
    reply = call_tool(engine, "get_schema_details", {"schemaName": "Ghost"})
    assert reply.is_error
    assert reply.text.startswith("Schema not found: Ghost")


# --- FastMCP boundary ---


def test_server_registers_tools(engine: QueryEngine) -> None:
    async def list_names() -> list[str]:
        async with Client(build_server(engine)) as client:
            tools = await client.list_tools()
            return sorted(tool.name for tool in tools)

    assert asyncio.run(list_names()) == sorted(TOOL_NAMES)


def test_server_call_returns_markdown(engine: QueryEngine) -> None:
    async def call() -> str:
        async with Client(build_server(engine)) as client:
            result = await client.call_tool("get_schema_details", {"schemaName": "Customer"})
            return result.content[0].text

    assert asyncio.run(call()).startswith("# Schema: Customer")
