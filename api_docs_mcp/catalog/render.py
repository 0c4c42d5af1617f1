from __future__ import annotations

import json
from typing import Any

from .model import (
    Endpoint,
    EndpointDetails,
    EndpointPage,
    Overview,
    Parameter,
    ResourceEndpoints,
    ResourceGroups,
    SchemaDetails,
)

SEARCH_DESCRIPTION_CHARS = 150

BUCKET_TITLES = {
    "list": ("List/Search", "List/Search Operations"),
    "get": ("Get Single", "Get Single Resource"),
    "create": ("Create", "Create Operations"),
    "update": ("Update", "Update Operations"),
    "delete": ("Delete", "Delete Operations"),
}


def _json_block(value: Any) -> str:
    return "```json\n" + json.dumps(value, indent=2, ensure_ascii=False) + "\n```"


def _join(lines: list[str]) -> str:
    return "\n".join(lines).rstrip() + "\n"


def render_overview(overview: Overview) -> str:
    lines = [
        f"# {overview.title or 'API'} Overview",
        "",
        "## General Information",
        f"- **API Title**: {overview.title or 'Not specified'}",
        f"- **Version**: {overview.version or 'Not specified'}",
        f"- **Base URL**: {overview.base_url}",
    ]
    if overview.validated:
        verdict = "passed" if overview.validation_error is None else f"failed ({overview.validation_error})"
        lines.append(f"- **OpenAPI Validation**: {verdict}")
    lines += [
        "",
        "## API Statistics",
        f"- **Total Endpoints**: {overview.total_endpoints}",
        f"- **Resource Groups**: {overview.total_tags}",
        "",
        "### Endpoints by Method:",
    ]
    lines += [f"- {method}: {count} endpoints" for method, count in overview.method_counts.items()]
    lines += ["", f"### Top {len(overview.top_tags)} Resource Groups:"]
    lines += [f"- {item.tag}: {item.count} endpoints" for item in overview.top_tags]
    lines += [
        "",
        "## Recommended Workflow",
        "1. Use `list_resource_groups` to see all available resources",
        "2. Use `get_endpoints_by_resource` to see all operations for a resource",
        "3. Use `get_endpoint_details` to understand specific endpoint requirements",
        "4. Use `search_endpoints` to find endpoints by functionality",
        "",
        "## API Description",
        overview.description or "No description available",
    ]
    return _join(lines)


def render_endpoint_list(page: EndpointPage) -> str:
    scope = f"{page.method} " if page.method else ""
    where = f" in {page.tag}" if page.tag else ""
    shown = len(page.endpoints)
    limited = f" (limited to {page.limit})" if page.truncated else ""
    lines = [
        "# API Endpoints",
        "",
        f"**Total Found**: {page.total} {scope}endpoints{where}",
        f"**Showing**: {shown} endpoints{limited}",
        "",
        "## Endpoints",
        "",
    ]
    for endpoint in page.endpoints:
        lines += [
            f"### {endpoint.method} {endpoint.path}",
            f"- **Operation**: {endpoint.operation_id or 'N/A'}",
            f"- **Summary**: {endpoint.summary or 'No summary'}",
            f"- **Tags**: {', '.join(endpoint.tags) or 'None'}",
            "",
        ]
    if page.truncated:
        lines.append(
            f"*Note: {page.total - shown} additional endpoints not shown. Use limit parameter to see more.*"
        )
    return _join(lines)


def _parameter_lines(param: Parameter, show_required: bool) -> list[str]:
    schema = param.schema or {}
    flag = ""
    if show_required:
        flag = " *REQUIRED*" if param.required else " *optional*"
    lines = [
        f"- **{param.name}** ({schema.get('type') or 'unknown'}){flag}",
        f"  - {param.description or 'No description'}",
    ]
    if schema.get("pattern"):
        lines.append(f"  - Pattern: `{schema['pattern']}`")
    if isinstance(schema.get("enum"), list):
        lines.append(f"  - Allowed values: {', '.join(str(v) for v in schema['enum'])}")
    if schema.get("minimum") is not None:
        lines.append(f"  - Min: {schema['minimum']}")
    if schema.get("maximum") is not None:
        lines.append(f"  - Max: {schema['maximum']}")
    return lines


def render_endpoint_details(details: EndpointDetails) -> str:
    endpoint = details.endpoint
    lines = [
        f"# {endpoint.method} {endpoint.path}",
        "",
        "## Overview",
        f"- **Operation ID**: {endpoint.operation_id or 'N/A'}",
        f"- **Summary**: {endpoint.summary or 'N/A'}",
        f"- **Resource Tags**: {', '.join(endpoint.tags) or 'N/A'}",
        "",
        "## Description",
        endpoint.description or "No detailed description available.",
        "",
        "## Parameters",
        "",
    ]

    if details.path_parameters:
        lines.append("### Path Parameters (Required)")
        for param in details.path_parameters:
            lines += _parameter_lines(param, show_required=False)
    else:
        lines += ["### Path Parameters", "None"]
    lines.append("")

    if details.query_parameters:
        lines.append("### Query Parameters")
        for param in details.query_parameters:
            lines += _parameter_lines(param, show_required=True)
    else:
        lines += ["### Query Parameters", "None"]
    lines.append("")

    if details.request_body_schema is not None:
        lines += [
            "## Request Body",
            f"{details.request_body_summary}",
            "",
            _json_block(details.request_body_schema),
        ]
    else:
        lines += ["## Request Body", "Not applicable for this endpoint."]
    lines.append("")

    if details.response_schema is not None:
        lines += [
            "## Response Schema",
            f"{details.response_summary}",
            "",
            _json_block(details.response_schema),
        ]
    else:
        lines += ["## Response", "Response schema not documented in OpenAPI spec."]
    lines.append("")

    required = ", ".join(p.name for p in details.required_parameters) or "None"
    optional = ", ".join(p.name for p in details.optional_parameters) or "None"
    lines += [
        "## Quick Reference",
        f"- **Base URL**: {details.base_url}",
        f"- **Full URL**: {details.full_url}",
        f"- **Required Parameters**: {required}",
        f"- **Optional Parameters**: {optional}",
    ]
    return _join(lines)


def _endpoint_entry(endpoint: Endpoint) -> list[str]:
    return [
        f"### {endpoint.method} {endpoint.path}",
        f"- **Summary**: {endpoint.summary or 'N/A'}",
        f"- **Operation**: {endpoint.operation_id or 'N/A'}",
        "",
    ]


def render_resource_endpoints(result: ResourceEndpoints) -> str:
    lines = [
        f"# {result.resource} Resource Endpoints",
        "",
        f"**Total Endpoints**: {result.total}",
        "",
        "## Operations Summary",
    ]
    for name, endpoints in result.buckets.items():
        lines.append(f"- **{BUCKET_TITLES[name][0]}**: {len(endpoints)} endpoints")
    lines.append("")

    for name, endpoints in result.buckets.items():
        if not endpoints:
            continue
        lines.append(f"## {BUCKET_TITLES[name][1]}")
        for endpoint in endpoints:
            lines += _endpoint_entry(endpoint)

    lines += [
        "## Next Steps",
        "Use `get_endpoint_details` with the specific path and method to see full documentation "
        "for any endpoint above.",
    ]
    return _join(lines)


def render_search_results(keyword: str, page: EndpointPage) -> str:
    if page.total == 0:
        return (
            f'No endpoints found matching "{keyword}"\n\n'
            "Tip: Try different keywords or use list_resource_groups to explore available resources.\n"
        )

    lines = [
        f'# Search Results for "{keyword}"',
        "",
        f"**Total Matches**: {page.total} endpoints",
        f"**Showing**: {len(page.endpoints)} endpoints",
        "",
    ]
    for number, endpoint in enumerate(page.endpoints, start=1):
        lines += [
            f"## {number}. {endpoint.method} {endpoint.path}",
            f"- **Summary**: {endpoint.summary or 'No summary'}",
            f"- **Operation**: {endpoint.operation_id or 'N/A'}",
            f"- **Tags**: {', '.join(endpoint.tags) or 'None'}",
        ]
        if endpoint.description:
            text = endpoint.description[:SEARCH_DESCRIPTION_CHARS]
            ellipsis = "..." if len(endpoint.description) > SEARCH_DESCRIPTION_CHARS else ""
            lines.append(f"- **Description**: {text}{ellipsis}")
        lines.append("")

    if page.truncated:
        lines += [
            f"**Note**: {page.total - len(page.endpoints)} additional results not shown. "
            "Use the limit parameter to see more.",
            "",
        ]
    lines.append("**Tip**: Use `get_endpoint_details` with the exact path and method to see full documentation.")
    return _join(lines)


def render_resource_groups(groups: ResourceGroups, tag_prefix: str) -> str:
    lines = [
        "# API Resource Groups",
        "",
        f"**Total Resource Groups**: {groups.total_groups}",
        "",
        "## Categories",
        "",
    ]
    for category, items in groups.categories.items():
        if not items:
            continue
        lines.append(f"### {category}")
        lines += [f"- {item.name} ({item.count} endpoints)" for item in items]
        lines.append("")

    lines.append("## All Resources (Alphabetically)")
    lines += [f"- **{item.name}**: {item.count} endpoints" for item in groups.alphabetical]
    lines += [
        "",
        "## Usage Tips",
        "- Use `get_endpoints_by_resource` with a resource name to see all its endpoints",
    ]
    if tag_prefix:
        lines.append(f"- Resource names can be used with or without the '{tag_prefix}' prefix")
    return _join(lines)


def render_schema(details: SchemaDetails) -> str:
    return _join(
        [
            f"# Schema: {details.name}",
            "",
            details.summary,
            "",
            _json_block(details.schema),
        ]
    )
