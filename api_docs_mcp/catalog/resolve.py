from __future__ import annotations

from typing import Any

from .model import (
    ArraySchema,
    EnumSchema,
    ObjectSchema,
    PrimitiveSchema,
    RefSchema,
    SchemaNode,
    parse_schema,
)

SCHEMA_REF_PREFIX = "#/components/schemas/"


def schema_ref(name: str) -> str:
    return f"{SCHEMA_REF_PREFIX}{name}"


class SchemaResolver:
    def __init__(self, schemas: dict[str, Any]) -> None:
        self._schemas = schemas

    def resolve(self, ref: str) -> dict[str, Any] | None:
        name = _schema_name(ref)
        if name is None:
            return None
        target = self._schemas.get(name)
        return target if isinstance(target, dict) else None

    def dereference(self, schema: dict[str, Any]) -> dict[str, Any] | None:
        node = parse_schema(schema)
        if isinstance(node, RefSchema):
            return self.resolve(node.ref)
        return schema

    def describe(self, schema: dict[str, Any] | SchemaNode) -> str:
        node = parse_schema(schema) if isinstance(schema, dict) else schema

        if isinstance(node, RefSchema):
            resolved = self.dereference(node.raw)
            description = resolved.get("description") if resolved else None
            return description if isinstance(description, str) and description else "Schema reference"

        if node.description:
            return node.description

        if isinstance(node, ObjectSchema):
            if isinstance(node.raw.get("properties"), dict):
                names = list(node.properties)
                suffix = "..." if len(names) > 3 else ""
                return f"Object with properties: {', '.join(names[:3])}{suffix}"
            return "object"

        if isinstance(node, ArraySchema):
            if node.items is not None:
                item_type = node.items.get("type")
                return f"Array of {item_type if isinstance(item_type, str) and item_type else 'items'}"
            return "array"

        if isinstance(node, (EnumSchema, PrimitiveSchema)):
            return node.type or "unknown"

        return "unknown"

    def expand(self, value: Any, seen: set[str] | None = None) -> Any:
        """Inline component references for display.

        A reference already being expanded further up the same branch is left
        as its ``$ref`` mapping, so self- and mutually-referential schemas stop.
        """
        if seen is None:
            seen = set()

        if isinstance(value, dict):
            ref = value.get("$ref")
            if isinstance(ref, str):
                name = _schema_name(ref)
                if name is None or name in seen:
                    return value
                target = self.resolve(ref)
                if target is None:
                    return value
                seen.add(name)
                expanded = self.expand(target, seen)
                seen.remove(name)
                return expanded

            return {key: self.expand(val, seen) for key, val in value.items()}

        if isinstance(value, list):
            return [self.expand(item, seen) for item in value]

        return value


def _schema_name(ref: str) -> str | None:
    if not isinstance(ref, str) or not ref.startswith(SCHEMA_REF_PREFIX):
        return None
    name = ref[len(SCHEMA_REF_PREFIX):]
    return name or None
