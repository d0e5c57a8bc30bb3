"""Shared test fixtures for gqlmock tests."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlencode

import pytest

from gqlmock.config import MockConfig
from gqlmock.formats.http import Header, InterceptedRequest


def make_request(
    method: str = "POST",
    url: str = "https://example.com/graphql",
    body: Any = None,
    headers: list[Header] | None = None,
) -> InterceptedRequest:
    """Helper to create an InterceptedRequest with minimal boilerplate."""
    return InterceptedRequest(
        method=method,
        url=url,
        headers=headers or [Header(name="Content-Type", value="application/json")],
        body=body,
    )


def get_gql_request(
    query: str,
    operation_name: str | None = None,
    variables: dict[str, Any] | None = None,
    url: str = "https://example.com/graphql",
) -> InterceptedRequest:
    """Build a GET request carrying GraphQL fields as URL parameters."""
    params: dict[str, str] = {"query": query}
    if operation_name is not None:
        params["operationName"] = operation_name
    if variables is not None:
        params["variables"] = json.dumps(variables)
    return make_request(method="GET", url=f"{url}?{urlencode(params)}")


def post_gql_request(
    query: str,
    operation_name: str | None = None,
    variables: dict[str, Any] | None = None,
    url: str = "https://example.com/graphql",
) -> InterceptedRequest:
    """Build a POST request with a JSON GraphQL body."""
    body: dict[str, Any] = {"query": query}
    if operation_name is not None:
        body["operationName"] = operation_name
    if variables is not None:
        body["variables"] = variables
    return make_request(method="POST", url=url, body=body)


@pytest.fixture
def quiet_config() -> MockConfig:
    return MockConfig(quiet=True)


@pytest.fixture
def accounts() -> dict[str, Any]:
    """Accounts and businesses referencing each other in cycles."""
    business: dict[str, Any] = {
        "__typename": "Business",
        "id": "0864297531",
        "type": "SME",
        "productSKUs": ["sku1", "sku2"],
        "employees": [],
    }
    other_business: dict[str, Any] = {
        "__typename": "Business",
        "id": "1357924680",
        "type": "Startup",
        "productSKUs": ["otherSku1", "otherSku2"],
        "employees": [],
    }
    jack: dict[str, Any] = {
        "__typename": "Account",
        "id": "123456789",
        "name": "Jack",
        "employer": business,
        "pastEmployers": [None, other_business],
    }
    jill: dict[str, Any] = {
        "__typename": "Account",
        "id": "0987654321",
        "name": "Jill",
        "employer": None,
        "pastEmployers": [],
    }
    business["employees"] = [jack, jill]
    return {
        "business": business,
        "other_business": other_business,
        "jack": jack,
        "jill": jill,
    }
