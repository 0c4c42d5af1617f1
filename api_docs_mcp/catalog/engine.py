from __future__ import annotations

import logging
from typing import Any

from .index import HTTP_METHODS, EndpointIndex
from .ingest import get_base_url, load_document, validate_document
from .model import (
    ApiDocument,
    Endpoint,
    EndpointDetails,
    EndpointPage,
    Overview,
    QueryResult,
    ResourceEndpoints,
    ResourceGroups,
    SchemaDetails,
    TagCount,
)
from .resolve import SchemaResolver, schema_ref
from .rules import (
    BUCKET_NAMES,
    CATEGORY_NAMES,
    DEFAULT_TAG_PREFIX,
    bucket_for,
    categorize,
    matches_resource,
    strip_prefix,
)

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20
TOP_TAG_COUNT = 10


class QueryEngine:
    """Read-only queries over one loaded API description.

    The document, index and resolver are built once and never change, so
    every query is a pure function of its arguments.
    """

    def __init__(
        self,
        document: ApiDocument,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        validation: tuple[bool, str | None] | None = None,
    ) -> None:
        self.document = document
        self.base_url = get_base_url(document)
        self.index = EndpointIndex.build(document)
        self.resolver = SchemaResolver(document.schemas)
        self.tag_prefix = tag_prefix
        self._validation = validation

    @classmethod
    def from_source(
        cls,
        source: str,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
        validate: bool = False,
    ) -> "QueryEngine":
        document = load_document(source)
        validation = None
        if validate:
            validation = validate_document(document.raw)
            if not validation[0]:
                logger.warning("Spec failed OpenAPI validation: %s", validation[1])
        engine = cls(document, tag_prefix=tag_prefix, validation=validation)
        logger.info("Loaded %d endpoints from OpenAPI specification", len(engine.index))
        return engine

    def overview(self) -> QueryResult[Overview]:
        method_counts: dict[str, int] = {}
        for endpoint in self.index:
            method_counts[endpoint.method] = method_counts.get(endpoint.method, 0) + 1

        tag_counts = self._tag_counts()
        top = sorted(tag_counts, key=lambda item: -item.count)[:TOP_TAG_COUNT]
        return QueryResult.success(
            Overview(
                title=self.document.title,
                version=self.document.version,
                description=self.document.description,
                base_url=self.base_url,
                total_endpoints=len(self.index),
                total_tags=len(tag_counts),
                method_counts=method_counts,
                top_tags=top,
                validated=self._validation is not None,
                validation_error=self._validation[1] if self._validation else None,
            )
        )

    def list_all(
        self,
        method: str | None = None,
        tag: str | None = None,
        limit: Any = None,
    ) -> QueryResult[EndpointPage]:
        if method is not None and (not isinstance(method, str) or method.upper() not in HTTP_METHODS):
            return QueryResult.invalid(
                f"Invalid method: {method}. Expected one of {', '.join(HTTP_METHODS)}."
            )
        if tag is not None and not isinstance(tag, str):
            return QueryResult.invalid(f"Invalid tag: {tag!r}. Expected a string.")
        if not _is_valid_limit(limit):
            return QueryResult.invalid(f"Invalid limit: {limit!r}. Expected an integer.")

        endpoints = list(self.index)
        if method:
            wanted = method.upper()
            endpoints = [e for e in endpoints if e.method == wanted]
        if tag:
            endpoints = [e for e in endpoints if tag in e.tags]

        effective = _safe_limit(limit, default=len(endpoints))
        return QueryResult.success(
            EndpointPage(
                total=len(endpoints),
                endpoints=endpoints[:effective],
                method=method.upper() if method else None,
                tag=tag or None,
                limit=effective,
            )
        )

    def get_details(self, path: str, method: str, expand_refs: bool = False) -> QueryResult[EndpointDetails]:
        if not _present(path):
            return QueryResult.invalid("Missing required argument: path")
        if not _present(method):
            return QueryResult.invalid("Missing required argument: method")
        if not isinstance(expand_refs, bool):
            return QueryResult.invalid(f"Invalid expand_refs: {expand_refs!r}. Expected a boolean.")

        endpoint = self.index.by_key(path, method)
        if endpoint is None:
            return QueryResult.not_found(
                f"Endpoint not found: {method.upper()} {path}\n\n"
                "Tip: Use search_endpoints or list_all_endpoints to find the correct path."
            )

        params = endpoint.parameters
        request_schema: Any = endpoint.request_body_schema
        response_schema: Any = endpoint.response_schema
        if expand_refs:
            request_schema = self.resolver.expand(request_schema)
            response_schema = self.resolver.expand(response_schema)

        return QueryResult.success(
            EndpointDetails(
                endpoint=endpoint,
                base_url=self.base_url,
                path_parameters=[p for p in params if p.location == "path"],
                query_parameters=[p for p in params if p.location == "query"],
                required_parameters=[p for p in params if p.required],
                optional_parameters=[p for p in params if not p.required],
                request_body_schema=request_schema,
                response_schema=response_schema,
                request_body_summary=_describe(self.resolver, endpoint.request_body_schema),
                response_summary=_describe(self.resolver, endpoint.response_schema),
            )
        )

    def get_by_resource(self, resource: str) -> QueryResult[ResourceEndpoints]:
        if not _present(resource):
            return QueryResult.invalid("Missing required argument: resource")

        matched = [
            endpoint
            for endpoint in self.index
            if any(matches_resource(tag, resource, self.tag_prefix) for tag in endpoint.tags)
        ]
        if not matched:
            return QueryResult.not_found(
                f"No endpoints found for resource: {resource}\n\n"
                "Tip: Use list_resource_groups to see all available resources."
            )

        buckets: dict[str, list[Endpoint]] = {name: [] for name in BUCKET_NAMES}
        for endpoint in matched:
            name = bucket_for(endpoint)
            if name is not None:
                buckets[name].append(endpoint)
        return QueryResult.success(ResourceEndpoints(resource=resource, buckets=buckets))

    def search(self, keyword: str, limit: Any = DEFAULT_SEARCH_LIMIT) -> QueryResult[EndpointPage]:
        if not _present(keyword):
            return QueryResult.invalid("Missing required argument: keyword")
        if not _is_valid_limit(limit):
            return QueryResult.invalid(f"Invalid limit: {limit!r}. Expected an integer.")

        needle = keyword.lower()
        matches = [endpoint for endpoint in self.index if _endpoint_contains(endpoint, needle)]
        effective = _safe_limit(limit, default=DEFAULT_SEARCH_LIMIT)
        return QueryResult.success(
            EndpointPage(total=len(matches), endpoints=matches[:effective], limit=effective)
        )

    def list_resource_groups(self) -> QueryResult[ResourceGroups]:
        counts = self._tag_counts()
        by_count = sorted(counts, key=lambda item: -item.count)

        categories: dict[str, list[TagCount]] = {name: [] for name in CATEGORY_NAMES}
        for item in by_count:
            categories[categorize(item.tag)].append(item)

        alphabetical = sorted(counts, key=lambda item: (item.name.casefold(), item.name))
        return QueryResult.success(
            ResourceGroups(counts=counts, categories=categories, alphabetical=alphabetical)
        )

    def get_schema(self, schema_name: str) -> QueryResult[SchemaDetails]:
        if not _present(schema_name):
            return QueryResult.invalid("Missing required argument: schemaName")

        schema = self.resolver.resolve(schema_ref(schema_name))
        if schema is None:
            return QueryResult.not_found(
                f"Schema not found: {schema_name}\n\n"
                "Tip: Use get_endpoint_details to see which schemas an endpoint references."
            )
        return QueryResult.success(
            SchemaDetails(name=schema_name, schema=schema, summary=self.resolver.describe(schema))
        )

    def _tag_counts(self) -> list[TagCount]:
        counts: dict[str, int] = {}
        for endpoint in self.index:
            for tag in endpoint.tags:
                counts[tag] = counts.get(tag, 0) + 1
        return [
            TagCount(tag=tag, name=strip_prefix(tag, self.tag_prefix), count=count)
            for tag, count in counts.items()
        ]


def _endpoint_contains(endpoint: Endpoint, needle: str) -> bool:
    fields = (endpoint.path, endpoint.summary, endpoint.description, endpoint.operation_id)
    if any(value and needle in value.lower() for value in fields):
        return True
    return any(needle in tag.lower() for tag in endpoint.tags)


def _describe(resolver: SchemaResolver, schema: dict[str, Any] | None) -> str | None:
    if schema is None:
        return None
    return resolver.describe(schema)


def _present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_valid_limit(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, int) and not isinstance(value, bool)


def _safe_limit(value: int | None, default: int) -> int:
    if value is None or value <= 0:
        return default
    return value
