"""Assemble GraphQL response bodies from successive contributions.

Each contribution is a transformer ``MockedResponse -> MockedResponse`` that
right-merges one top-level key (``data``, ``errors``, ``extensions``) into
the JSON body accumulated so far. Transformers are applied left to right, so
later contributions override overlapping keys of earlier ones.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from graphql.language import DocumentNode

from gqlmock.engine.projection import project
from gqlmock.engine.runtime_types import TypeResolver
from gqlmock.engine.types import GraphQLVariables
from gqlmock.formats.http import MockedResponse
from gqlmock.helpers.http import set_header
from gqlmock.helpers.json import json_parse, merge_right

ResponseTransformer = Callable[[MockedResponse], MockedResponse]


def compose_response(*transformers: ResponseTransformer) -> MockedResponse:
    """Build a response by applying transformers to a default 200 response."""
    response = MockedResponse()
    for transformer in transformers:
        response = transformer(response)
    return response


def json_body(value: Any) -> ResponseTransformer:
    """Serialize ``value`` as the JSON body of the response.

    Circular structures raise ``ValueError`` from the JSON encoder.
    """

    def transform(response: MockedResponse) -> MockedResponse:
        return response.model_copy(
            update={
                "headers": set_header(response.headers, "Content-Type", "application/json"),
                "body": json.dumps(value),
            }
        )

    return transform


def _merge_into_body(contribution: dict[str, Any]) -> ResponseTransformer:
    def transform(response: MockedResponse) -> MockedResponse:
        previous = json_parse(response.body)
        previous_body: dict[str, Any] = previous if isinstance(previous, dict) else {}
        return json_body(merge_right(previous_body, contribution))(response)

    return transform


def _unchanged(response: MockedResponse) -> MockedResponse:
    return response


def data(
    payload: dict[str, Any] | None,
    document: DocumentNode | None = None,
    operation_name: str | None = None,
    variables: GraphQLVariables | None = None,
    type_resolver: TypeResolver | None = None,
) -> ResponseTransformer:
    """Set ``payload`` as the response ``data``.

    Given a document, only the fields selected by the operation are kept.
    """
    if payload is None:
        return _unchanged

    picked = payload
    if isinstance(payload, dict) and document is not None:
        picked = project(payload, document, operation_name, variables, type_resolver)
    return _merge_into_body({"data": picked})


def errors(error_list: list[dict[str, Any]] | None) -> ResponseTransformer:
    """Set the response ``errors``. ``None`` leaves the response untouched."""
    if error_list is None:
        return _unchanged
    return _merge_into_body({"errors": error_list})


def extensions(payload: dict[str, Any] | None) -> ResponseTransformer:
    """Set the response ``extensions``. ``None`` leaves the response untouched."""
    if payload is None:
        return _unchanged
    return _merge_into_body({"extensions": payload})


def field(name: str, value: Any) -> ResponseTransformer:
    """Set a custom top-level field of the response body, next to ``data``."""
    if not isinstance(name, str) or not name.strip():
        raise ValueError(
            "Failed to set a custom field on a GraphQL response: field name cannot be empty."
        )
    if name.strip() == "data":
        raise ValueError(
            'Failed to set a custom "data" field on a mocked GraphQL response: forbidden field name.'
            " Did you mean to call data() instead?"
        )
    return _merge_into_body({name: value})
