"""Ordered rule tables for grouping tags and endpoints.

Every table is evaluated top-down and the first matching rule wins, so the
order of entries is the precedence.
"""

from __future__ import annotations

from typing import Callable

from .model import Endpoint

DEFAULT_TAG_PREFIX = "fortnox_"

OTHER_CATEGORY = "Other"

# Keyword containment is case-sensitive and checked against the full tag.
CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Core Business", ("Customers", "Suppliers", "Employees", "Articles", "Products")),
    ("Financial", ("Invoice", "Payment", "Account", "Currency", "Financial")),
    ("Documents", ("Order", "Offer", "Contract", "Voucher")),
    ("Configuration", ("Settings", "Mode", "Price", "Label", "Unit")),
)

CATEGORY_NAMES: tuple[str, ...] = tuple(name for name, _ in CATEGORY_RULES) + (OTHER_CATEGORY,)


def categorize(tag: str) -> str:
    for category, keywords in CATEGORY_RULES:
        if any(keyword in tag for keyword in keywords):
            return category
    return OTHER_CATEGORY


BUCKET_RULES: tuple[tuple[str, Callable[[Endpoint], bool]], ...] = (
    ("list", lambda e: e.method == "GET" and not e.has_path_placeholder),
    ("get", lambda e: e.method == "GET" and e.has_path_placeholder),
    ("create", lambda e: e.method == "POST"),
    ("update", lambda e: e.method in ("PUT", "PATCH")),
    ("delete", lambda e: e.method == "DELETE"),
)

BUCKET_NAMES: tuple[str, ...] = tuple(name for name, _ in BUCKET_RULES)


def bucket_for(endpoint: Endpoint) -> str | None:
    for name, predicate in BUCKET_RULES:
        if predicate(endpoint):
            return name
    return None


def strip_prefix(tag: str, prefix: str = DEFAULT_TAG_PREFIX) -> str:
    if prefix and tag.startswith(prefix):
        return tag[len(prefix):]
    return tag


def matches_resource(tag: str, resource: str, prefix: str = DEFAULT_TAG_PREFIX) -> bool:
    """Bidirectional, case-insensitive substring match between a tag and a resource name."""
    needle = resource.lower()
    lowered = tag.lower()
    return needle in lowered or strip_prefix(lowered, prefix.lower()) in needle
