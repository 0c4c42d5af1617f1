from __future__ import annotations

import json
import logging
import os
from collections.abc import Hashable, Mapping
from typing import Any, cast

import httpx
import yaml
from openapi_spec_validator import validate

from .model import ApiDocument

logger = logging.getLogger(__name__)


class SpecLoadError(RuntimeError):
    pass


def load_document(source: str) -> ApiDocument:
    """Load an API description from a file path or http(s) URL and check its shape."""
    if source.startswith(("http://", "https://")):
        content, hint = _fetch_url(source)
    else:
        content, hint = _read_file(source)
    raw = parse_content(content, hint=hint)
    document = build_document(raw)
    logger.info(
        "Loaded %s (%d paths, %d schemas) from %s",
        document.title or "untitled spec",
        len(document.paths),
        len(document.schemas),
        source,
    )
    return document


def _read_file(path: str) -> tuple[str, str]:
    if not os.path.isfile(path):
        raise SpecLoadError(f"Spec file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as handle:
            content = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecLoadError(f"Failed to read spec file {path}: {exc}") from exc

    lower = path.lower()
    if lower.endswith(".json"):
        return content, "json"
    if lower.endswith(".yaml") or lower.endswith(".yml"):
        return content, "yaml"
    return content, ""


def _fetch_url(url: str) -> tuple[str, str]:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecLoadError(f"HTTP {exc.response.status_code} fetching spec from {url}") from exc
    except httpx.HTTPError as exc:
        raise SpecLoadError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.text, "json"
    if "yaml" in content_type or "yml" in content_type:
        return response.text, "yaml"
    return response.text, ""


def parse_content(content: str, hint: str = "") -> dict[str, Any]:
    if not content.strip():
        raise SpecLoadError("Spec content is empty")

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecLoadError(f"Invalid JSON: {exc}") from exc
        else:
            return _ensure_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise SpecLoadError(f"Failed to parse spec as JSON or YAML: {exc}") from exc
    return _ensure_mapping(result)


def _ensure_mapping(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        kind = type(value).__name__ if value is not None else "empty document"
        raise SpecLoadError(f"Spec must be a JSON/YAML object (got {kind})")
    return value


def build_document(raw: dict[str, Any]) -> ApiDocument:
    info = raw.get("info")
    if not isinstance(info, dict):
        raise SpecLoadError("Spec is missing required field: info")
    paths = raw.get("paths")
    if not isinstance(paths, dict):
        raise SpecLoadError("Spec is missing required field: paths")
    components = raw.get("components")
    schemas = components.get("schemas") if isinstance(components, dict) else None
    if not isinstance(schemas, dict):
        raise SpecLoadError("Spec is missing required field: components.schemas")

    servers = raw.get("servers")
    openapi = raw.get("openapi")
    return ApiDocument(
        openapi=openapi if isinstance(openapi, str) else None,
        title=_text(info.get("title")),
        version=_text(info.get("version")),
        description=_text(info.get("description")),
        servers=[item for item in servers if isinstance(item, dict)] if isinstance(servers, list) else [],
        paths=paths,
        schemas=schemas,
        raw=raw,
    )


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def get_base_url(document: ApiDocument) -> str:
    if not document.servers:
        raise SpecLoadError("No servers defined in OpenAPI spec")
    url = document.servers[0].get("url")
    if not isinstance(url, str):
        raise SpecLoadError("First server entry has no url")
    return url


def validate_document(raw: dict[str, Any]) -> tuple[bool, str | None]:
    try:
        validate(cast(Mapping[Hashable, Any], raw))
    except Exception as exc:
        return False, _validation_error_message(exc)
    return True, None


def _validation_error_message(error: Exception) -> str:
    message = str(error).strip().splitlines()
    return message[0] if message else error.__class__.__name__
