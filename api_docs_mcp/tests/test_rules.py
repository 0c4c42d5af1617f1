from __future__ import annotations

import pytest

from api_docs_mcp.catalog.model import Endpoint
from api_docs_mcp.catalog.rules import (
    BUCKET_NAMES,
    CATEGORY_NAMES,
    bucket_for,
    categorize,
    matches_resource,
    strip_prefix,
)


def _endpoint(method: str, path: str) -> Endpoint:
    return Endpoint(
        path=path,
        method=method,
        operation_id=None,
        summary=None,
        description=None,
        parameters=(),
        request_body_schema=None,
        response_schema=None,
        tags=(),
    )


@pytest.mark.parametrize(
    "tag,category",
    [
        ("fortnox_Customers", "Core Business"),
        ("fortnox_Articles", "Core Business"),
        ("fortnox_Invoices", "Financial"),
        ("fortnox_SupplierInvoicePayments", "Financial"),
        ("fortnox_Orders", "Documents"),
        ("fortnox_Vouchers", "Documents"),
        ("fortnox_CompanySettings", "Configuration"),
        ("fortnox_PriceLists", "Configuration"),
        ("fortnox_Projects", "Other"),
        # keyword matching is case-sensitive
        ("fortnox_invoices", "Other"),
    ],
)
def test_categorize(tag: str, category: str) -> None:
    assert categorize(tag) == category


def test_financial_checked_before_documents() -> None:
    # "InvoiceOrders" contains both a Financial and a Documents keyword
    assert categorize("fortnox_InvoiceOrders") == "Financial"


def test_category_names_order() -> None:
    assert CATEGORY_NAMES == ("Core Business", "Financial", "Documents", "Configuration", "Other")


@pytest.mark.parametrize(
    "method,path,bucket",
    [
        ("GET", "/3/customers", "list"),
        ("GET", "/3/customers/{CustomerNumber}", "get"),
        ("POST", "/3/customers", "create"),
        ("POST", "/3/invoices/{DocumentNumber}/bookkeep", "create"),
        ("PUT", "/3/customers/{CustomerNumber}", "update"),
        ("PATCH", "/3/articles", "update"),
        ("DELETE", "/3/customers/{CustomerNumber}", "delete"),
    ],
)
def test_bucket_for(method: str, path: str, bucket: str) -> None:
    assert bucket_for(_endpoint(method, path)) == bucket


def test_bucket_names_order() -> None:
    assert BUCKET_NAMES == ("list", "get", "create", "update", "delete")


def test_strip_prefix() -> None:
    assert strip_prefix("fortnox_Customers") == "Customers"
    assert strip_prefix("Customers") == "Customers"
    assert strip_prefix("acme_Customers", "acme_") == "Customers"
    assert strip_prefix("fortnox_Customers", "") == "fortnox_Customers"


@pytest.mark.parametrize(
    "tag,resource,expected",
    [
        ("fortnox_Customers", "customers", True),
        ("fortnox_Customers", "Customer", True),
        ("fortnox_Customers", "fortnox_Customers", True),
        ("fortnox_Invoices", "CustomerInvoices", True),
        ("fortnox_Invoices", "Orders", False),
        ("Fortnox_Invoices", "allinvoices", True),
    ],
)
def test_matches_resource(tag: str, resource: str, expected: bool) -> None:
    assert matches_resource(tag, resource) is expected
