from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .engine import QueryEngine
from .model import QueryResult
from .render import (
    render_endpoint_details,
    render_endpoint_list,
    render_overview,
    render_resource_endpoints,
    render_resource_groups,
    render_schema,
    render_search_results,
)


@dataclass(frozen=True)
class ToolReply:
    text: str
    is_error: bool = False


def _reply(result: QueryResult[Any], render: Callable[[Any], str]) -> ToolReply:
    if result.error is not None:
        return ToolReply(text=result.error.message, is_error=True)
    return ToolReply(text=render(result.value))


def _overview(engine: QueryEngine, args: dict[str, Any]) -> ToolReply:
    return _reply(engine.overview(), render_overview)


def _list_all(engine: QueryEngine, args: dict[str, Any]) -> ToolReply:
    result = engine.list_all(
        method=args.get("method") or None,
        tag=args.get("tag") or None,
        limit=args.get("limit"),
    )
    return _reply(result, render_endpoint_list)


def _details(engine: QueryEngine, args: dict[str, Any]) -> ToolReply:
    expand_refs = args.get("expand_refs")
    result = engine.get_details(
        args["path"], args["method"], expand_refs=False if expand_refs is None else expand_refs
    )
    return _reply(result, render_endpoint_details)


def _by_resource(engine: QueryEngine, args: dict[str, Any]) -> ToolReply:
    return _reply(engine.get_by_resource(args["resource"]), render_resource_endpoints)


def _search(engine: QueryEngine, args: dict[str, Any]) -> ToolReply:
    keyword = args["keyword"]
    limit = args.get("limit")
    result = engine.search(keyword, limit=limit) if limit is not None else engine.search(keyword)
    return _reply(result, lambda page: render_search_results(keyword, page))


def _groups(engine: QueryEngine, args: dict[str, Any]) -> ToolReply:
    return _reply(
        engine.list_resource_groups(),
        lambda groups: render_resource_groups(groups, engine.tag_prefix),
    )


def _schema(engine: QueryEngine, args: dict[str, Any]) -> ToolReply:
    return _reply(engine.get_schema(args["schemaName"]), render_schema)


# tool name -> (required argument names, handler)
TOOLS: dict[str, tuple[tuple[str, ...], Callable[[QueryEngine, dict[str, Any]], ToolReply]]] = {
    "get_api_overview": ((), _overview),
    "list_all_endpoints": ((), _list_all),
    "get_endpoint_details": (("path", "method"), _details),
    "get_endpoints_by_resource": (("resource",), _by_resource),
    "search_endpoints": (("keyword",), _search),
    "list_resource_groups": ((), _groups),
    "get_schema_details": (("schemaName",), _schema),
}


def call_tool(engine: QueryEngine, name: str, arguments: dict[str, Any] | None = None) -> ToolReply:
    entry = TOOLS.get(name)
    if entry is None:
        return ToolReply(text=f"Unknown tool: {name}", is_error=True)

    required, handler = entry
    args = arguments or {}
    missing = [key for key in required if args.get(key) is None]
    if missing:
        return ToolReply(text=f"Missing required argument: {', '.join(missing)}", is_error=True)
    return handler(engine, args)
