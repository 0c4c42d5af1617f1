from .dispatch import ToolReply, call_tool
from .engine import QueryEngine
from .index import EndpointIndex
from .ingest import SpecLoadError, get_base_url, load_document
from .resolve import SchemaResolver

__all__ = [
    "EndpointIndex",
    "QueryEngine",
    "SchemaResolver",
    "SpecLoadError",
    "ToolReply",
    "call_tool",
    "get_base_url",
    "load_document",
]
