from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class ApiDocument:
    openapi: str | None
    title: str | None
    version: str | None
    description: str | None
    servers: list[dict[str, Any]]
    paths: dict[str, Any]
    schemas: dict[str, Any]
    raw: dict[str, Any]


@dataclass(frozen=True)
class RefSchema:
    ref: str
    raw: dict[str, Any]


@dataclass(frozen=True)
class ObjectSchema:
    properties: dict[str, Any]
    required: list[str]
    description: str | None
    raw: dict[str, Any]


@dataclass(frozen=True)
class ArraySchema:
    items: dict[str, Any] | None
    description: str | None
    raw: dict[str, Any]


@dataclass(frozen=True)
class EnumSchema:
    values: list[Any]
    type: str | None
    description: str | None
    raw: dict[str, Any]


@dataclass(frozen=True)
class PrimitiveSchema:
    type: str | None
    description: str | None
    raw: dict[str, Any]


SchemaNode = Union[RefSchema, ObjectSchema, ArraySchema, EnumSchema, PrimitiveSchema]


def parse_schema(raw: dict[str, Any]) -> SchemaNode:
    """Classify a raw schema mapping into one of the schema variants."""
    ref = raw.get("$ref")
    if isinstance(ref, str):
        return RefSchema(ref=ref, raw=raw)

    schema_type = raw.get("type") if isinstance(raw.get("type"), str) else None
    description = raw.get("description") if isinstance(raw.get("description"), str) else None

    if schema_type == "object":
        properties = raw.get("properties")
        required = raw.get("required")
        return ObjectSchema(
            properties=properties if isinstance(properties, dict) else {},
            required=[name for name in required if isinstance(name, str)] if isinstance(required, list) else [],
            description=description,
            raw=raw,
        )
    if schema_type == "array":
        items = raw.get("items")
        return ArraySchema(
            items=items if isinstance(items, dict) else None,
            description=description,
            raw=raw,
        )
    if isinstance(raw.get("enum"), list):
        return EnumSchema(values=list(raw["enum"]), type=schema_type, description=description, raw=raw)
    return PrimitiveSchema(type=schema_type, description=description, raw=raw)


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool
    description: str | None
    schema: dict[str, Any] | None


@dataclass(frozen=True)
class Endpoint:
    path: str
    method: str
    operation_id: str | None
    summary: str | None
    description: str | None
    parameters: tuple[Parameter, ...]
    request_body_schema: dict[str, Any] | None
    response_schema: dict[str, Any] | None
    tags: tuple[str, ...]

    @property
    def key(self) -> tuple[str, str]:
        return (self.path, self.method)

    @property
    def has_path_placeholder(self) -> bool:
        return "{" in self.path


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"


@dataclass(frozen=True)
class QueryError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    value: T | None = None
    error: QueryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "QueryResult[T]":
        return cls(value=value)

    @classmethod
    def not_found(cls, message: str) -> "QueryResult[T]":
        return cls(error=QueryError(ErrorKind.NOT_FOUND, message))

    @classmethod
    def invalid(cls, message: str) -> "QueryResult[T]":
        return cls(error=QueryError(ErrorKind.INVALID_ARGUMENT, message))


@dataclass(frozen=True)
class TagCount:
    tag: str
    name: str
    count: int


@dataclass(frozen=True)
class Overview:
    title: str | None
    version: str | None
    description: str | None
    base_url: str
    total_endpoints: int
    total_tags: int
    method_counts: dict[str, int]
    top_tags: list[TagCount]
    validation_error: str | None = None
    validated: bool = False


@dataclass(frozen=True)
class EndpointPage:
    total: int
    endpoints: list[Endpoint]
    method: str | None = None
    tag: str | None = None
    limit: int | None = None

    @property
    def truncated(self) -> bool:
        return len(self.endpoints) < self.total


@dataclass(frozen=True)
class EndpointDetails:
    endpoint: Endpoint
    base_url: str
    path_parameters: list[Parameter]
    query_parameters: list[Parameter]
    required_parameters: list[Parameter]
    optional_parameters: list[Parameter]
    request_body_schema: Any
    response_schema: Any
    request_body_summary: str | None
    response_summary: str | None

    @property
    def full_url(self) -> str:
        return f"{self.base_url}{self.endpoint.path}"


@dataclass(frozen=True)
class ResourceEndpoints:
    resource: str
    buckets: dict[str, list[Endpoint]]

    @property
    def total(self) -> int:
        return sum(len(items) for items in self.buckets.values())


@dataclass(frozen=True)
class ResourceGroups:
    counts: list[TagCount]
    categories: dict[str, list[TagCount]]
    alphabetical: list[TagCount] = field(default_factory=list)

    @property
    def total_groups(self) -> int:
        return len(self.counts)


@dataclass(frozen=True)
class SchemaDetails:
    name: str
    schema: dict[str, Any]
    summary: str
