"""GraphQL request handler: match intercepted requests and run mock resolvers."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from graphql import GraphQLSchema
from graphql.language import DocumentNode
from pydantic import Field
from rich.markup import escape

from gqlmock.engine import response as response_context
from gqlmock.engine.document import parse_document_node, parse_graphql_request
from gqlmock.engine.errors import (
    DocumentAnalysisError,
    GraphQLMockError,
    HandlerDefinitionError,
)
from gqlmock.engine.response import ResponseTransformer, compose_response
from gqlmock.engine.runtime_types import SchemaTypeResolver, TypeResolver
from gqlmock.engine.types import ExpectedOperationType, ParsedGraphQLRequest
from gqlmock.formats.http import InterceptedRequest, MockedResponse
from gqlmock.helpers import console as console_helpers
from gqlmock.helpers.http import Endpoint, get_public_url, match_request_url

OperationSelector = str | re.Pattern[str] | DocumentNode


class GraphQLRequest(InterceptedRequest):
    """The request as seen by resolvers, with its coerced variables."""

    variables: dict[str, Any] = Field(default_factory=dict)


@dataclass
class GraphQLContext:
    """Response helpers handed to resolvers, bound to the parsed request."""

    parsed_request: ParsedGraphQLRequest
    type_resolver: TypeResolver | None = None

    def data(self, payload: dict[str, Any] | None) -> ResponseTransformer:
        """Set the response data, keeping only the fields the operation selects."""
        return response_context.data(
            payload,
            self.parsed_request.document,
            self.parsed_request.operation_name,
            self.parsed_request.variables,
            self.type_resolver,
        )

    def errors(self, error_list: list[dict[str, Any]] | None) -> ResponseTransformer:
        return response_context.errors(error_list)

    def extensions(self, payload: dict[str, Any] | None) -> ResponseTransformer:
        return response_context.extensions(payload)

    def field(self, name: str, value: Any) -> ResponseTransformer:
        return response_context.field(name, value)

    def respond(self, *transformers: ResponseTransformer) -> MockedResponse:
        return compose_response(*transformers)


Resolver = Callable[[GraphQLRequest, GraphQLContext], MockedResponse | None]


@dataclass
class HandlerInfo:
    header: str
    operation_type: ExpectedOperationType
    operation_selector: str | re.Pattern[str]


@dataclass
class HandlerExecutionResult:
    handler: GraphQLHandler
    request: GraphQLRequest
    parsed_result: ParsedGraphQLRequest
    response: MockedResponse | None


def _endpoint_label(endpoint: Endpoint) -> str:
    return endpoint.pattern if isinstance(endpoint, re.Pattern) else endpoint


class GraphQLHandler:
    """Mock definition for GraphQL operations.

    Matches requests sent to ``endpoint`` whose operation has the expected
    type (or any type with ``"all"``) and a name equal to the selector (or
    matching it, for a compiled pattern). A ``DocumentNode`` selector stands
    for the name of its single named operation.
    """

    def __init__(
        self,
        operation_type: ExpectedOperationType,
        operation_selector: OperationSelector,
        endpoint: Endpoint,
        resolver: Resolver,
        *,
        schema: GraphQLSchema | None = None,
        typename_field: str = "__typename",
    ):
        selector = (
            _selector_from_document(operation_type, operation_selector)
            if isinstance(operation_selector, DocumentNode)
            else operation_selector
        )
        origin = _endpoint_label(endpoint)
        selector_label = selector.pattern if isinstance(selector, re.Pattern) else selector
        header = (
            f"{operation_type} (origin: {origin})"
            if operation_type == "all"
            else f"{operation_type} {selector_label} (origin: {origin})"
        )

        self.info = HandlerInfo(
            header=header, operation_type=operation_type, operation_selector=selector
        )
        self.endpoint = endpoint
        self.resolver = resolver
        self.schema = schema
        self.type_resolver: TypeResolver | None = None
        if schema is not None:
            self.type_resolver = SchemaTypeResolver(schema, typename_field)

    def __repr__(self) -> str:
        return f"GraphQLHandler({self.info.header!r})"

    def parse(self, request: InterceptedRequest) -> ParsedGraphQLRequest | None:
        """Parse a request, reporting malformed GraphQL on the console.

        Malformed requests are treated like non-GraphQL ones so that one bad
        request does not abort the whole handler chain.
        """
        try:
            return parse_graphql_request(request, self.schema)
        except GraphQLMockError as e:
            console_helpers.error(e.message)
            return None

    def predicate(
        self, request: InterceptedRequest, parsed_result: ParsedGraphQLRequest | None
    ) -> bool:
        """Check whether a parsed request is handled by this handler."""
        if parsed_result is None:
            return False

        if not parsed_result.operation_name and self.info.operation_type != "all":
            console_helpers.warn(
                'Failed to intercept a GraphQL request at "%s %s": anonymous GraphQL'
                " operations are not supported.\n\nConsider naming this operation or"
                ' using the "gql.operation" handler to intercept GraphQL requests'
                " regardless of their operation name/type.",
                request.method,
                get_public_url(request.url),
            )
            return False

        has_matching_url = match_request_url(request.url, self.endpoint)
        has_matching_operation_type = (
            self.info.operation_type == "all"
            or parsed_result.operation_type == self.info.operation_type
        )

        selector = self.info.operation_selector
        if isinstance(selector, re.Pattern):
            has_matching_operation_name = (
                selector.search(parsed_result.operation_name or "") is not None
            )
        else:
            has_matching_operation_name = parsed_result.operation_name == selector

        return has_matching_url and has_matching_operation_type and has_matching_operation_name

    def test(self, request: InterceptedRequest) -> bool:
        """Parse and match a request in one go."""
        return self.predicate(request, self.parse(request))

    def run(self, request: InterceptedRequest) -> HandlerExecutionResult | None:
        """Run the resolver for a matching request, or return ``None``."""
        parsed_result = self.parse(request)
        if parsed_result is None or not self.predicate(request, parsed_result):
            return None

        public_request = GraphQLRequest(
            **{**dict(request), "variables": parsed_result.variables}
        )
        context = GraphQLContext(parsed_result, self.type_resolver)
        mocked_response = self.resolver(public_request, context)

        return HandlerExecutionResult(
            handler=self,
            request=public_request,
            parsed_result=parsed_result,
            response=mocked_response,
        )

    def log(self, result: HandlerExecutionResult) -> None:
        """Print a one-line summary of a handled request."""
        parsed = result.parsed_result
        request_info = (
            f"{parsed.operation_type} {parsed.operation_name}"
            if parsed.operation_name
            else f"anonymous {parsed.operation_type}"
        )
        status = result.response.status if result.response else 0
        status_text = result.response.status_text if result.response else ""
        color = "green" if status < 300 else "yellow" if status < 400 else "red"
        summary = console_helpers.format_message(
            "%s %s", console_helpers.timestamp(), request_info
        )
        console_helpers.console.print(
            f"{escape(summary)} ([{color}]{status} {escape(status_text)}[/{color}])"
        )


def _selector_from_document(
    operation_type: ExpectedOperationType, document: DocumentNode
) -> str:
    """Derive the operation name selector from a document."""
    try:
        parsed = parse_document_node(document, coerce_variables=False)
    except DocumentAnalysisError as e:
        raise HandlerDefinitionError(
            f"Failed to create a GraphQL handler: {e.message}"
        ) from e

    if operation_type != "all" and parsed.operation_type != operation_type:
        raise HandlerDefinitionError(
            "Failed to create a GraphQL handler: provided a DocumentNode with a mismatched"
            f' operation type (expected "{operation_type}", but got "{parsed.operation_type}").'
        )
    if not parsed.operation_name:
        raise HandlerDefinitionError(
            "Failed to create a GraphQL handler: provided a DocumentNode with no operation name."
        )
    return parsed.operation_name
