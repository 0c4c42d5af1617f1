from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from api_docs_mcp.catalog.engine import QueryEngine
from api_docs_mcp.catalog.ingest import build_document

ROOT = Path(__file__).resolve().parent
SPECS = ROOT / "specs"
MINI_SPEC = SPECS / "fortnox_mini.json"


def make_document(paths: dict[str, Any], schemas: dict[str, Any] | None = None) -> Any:
    return build_document(
        {
            "openapi": "3.0.1",
            "info": {"title": "Test API", "version": "1"},
            "servers": [{"url": "https://api.example.com"}],
            "paths": paths,
            "components": {"schemas": schemas or {}},
        }
    )


def make_engine(paths: dict[str, Any], schemas: dict[str, Any] | None = None) -> QueryEngine:
    return QueryEngine(make_document(paths, schemas))


@pytest.fixture()
def engine() -> QueryEngine:
    return QueryEngine.from_source(str(MINI_SPEC))
