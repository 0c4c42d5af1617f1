from __future__ import annotations

import logging
from typing import Any, Iterator

from .model import ApiDocument, Endpoint, Parameter

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")
SUCCESS_STATUSES = ("200", "201")


class EndpointIndex:
    """Ordered, immutable view of every (path, method) operation in a document.

    Paths keep the document's key order; within a path the methods follow
    ``HTTP_METHODS``. Every listing that does not re-sort relies on this order.
    """

    def __init__(self, endpoints: list[Endpoint]) -> None:
        self._endpoints = tuple(endpoints)
        self._positions = {endpoint.key: pos for pos, endpoint in enumerate(self._endpoints)}

    @classmethod
    def build(cls, document: ApiDocument) -> "EndpointIndex":
        endpoints: list[Endpoint] = []
        for path, path_item in document.paths.items():
            if not isinstance(path_item, dict):
                continue
            path_parameters = path_item.get("parameters")
            for method in HTTP_METHODS:
                operation = path_item.get(method.lower())
                if not isinstance(operation, dict):
                    continue
                endpoints.append(_build_endpoint(path, method, operation, path_parameters))
        logger.debug("Indexed %d endpoints across %d paths", len(endpoints), len(document.paths))
        return cls(endpoints)

    def all(self) -> tuple[Endpoint, ...]:
        return self._endpoints

    def by_key(self, path: str, method: str) -> Endpoint | None:
        pos = self._positions.get((path, method.upper()))
        if pos is None:
            return None
        return self._endpoints[pos]

    def __len__(self) -> int:
        return len(self._endpoints)

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self._endpoints)


def _build_endpoint(
    path: str, method: str, operation: dict[str, Any], path_parameters: Any
) -> Endpoint:
    operation_id = operation.get("operationId")
    summary = operation.get("summary")
    description = operation.get("description")
    tags = operation.get("tags")
    return Endpoint(
        path=path,
        method=method,
        operation_id=operation_id if isinstance(operation_id, str) else None,
        summary=summary if isinstance(summary, str) else None,
        description=description if isinstance(description, str) else None,
        parameters=tuple(_merge_parameters(path_parameters, operation.get("parameters"))),
        request_body_schema=_request_body_schema(operation.get("requestBody")),
        response_schema=_response_schema(operation.get("responses")),
        tags=tuple(tag for tag in tags if isinstance(tag, str)) if isinstance(tags, list) else (),
    )


def _merge_parameters(path_params: Any, op_params: Any) -> list[Parameter]:
    merged: dict[tuple[str, str], Parameter] = {}

    def ingest(params: Any) -> None:
        if not isinstance(params, list):
            return
        for param in params:
            parsed = _parse_parameter(param)
            if parsed is not None:
                merged[(parsed.name, parsed.location)] = parsed

    ingest(path_params)
    ingest(op_params)
    return list(merged.values())


def _parse_parameter(param: Any) -> Parameter | None:
    if not isinstance(param, dict):
        return None
    name = param.get("name")
    location = param.get("in")
    if not isinstance(name, str) or not isinstance(location, str):
        return None
    description = param.get("description")
    schema = param.get("schema")
    return Parameter(
        name=name,
        location=location,
        required=bool(param.get("required", False)),
        description=description if isinstance(description, str) else None,
        schema=schema if isinstance(schema, dict) else None,
    )


def _first_media_schema(content: Any) -> dict[str, Any] | None:
    if not isinstance(content, dict) or not content:
        return None
    media = next(iter(content.values()))
    if not isinstance(media, dict):
        return None
    schema = media.get("schema")
    return schema if isinstance(schema, dict) else None


def _request_body_schema(request_body: Any) -> dict[str, Any] | None:
    if not isinstance(request_body, dict):
        return None
    return _first_media_schema(request_body.get("content"))


def _response_schema(responses: Any) -> dict[str, Any] | None:
    if not isinstance(responses, dict):
        return None
    for status in SUCCESS_STATUSES:
        # YAML loads unquoted status codes as integers
        response = responses.get(status, responses.get(int(status)))
        if isinstance(response, dict):
            return _first_media_schema(response.get("content"))
    return None
