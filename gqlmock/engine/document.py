"""Parse GraphQL query text and resolve the operation a request executes.

Uses graphql-core to parse the query into a DocumentNode, then picks exactly
one OperationDefinitionNode following the executable-document rules
(anonymous operations must stand alone, several operations need an
operation name) and coerces the request variables against the operation's
variable definitions.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from functools import lru_cache
from typing import Any, cast

from graphql import GraphQLSchema, parse as gql_parse
from graphql.error import GraphQLSyntaxError
from graphql.execution.values import get_variable_values
from graphql.language import print_ast
from graphql.language.ast import (
    DocumentNode,
    FragmentDefinitionNode,
    NonNullTypeNode,
    OperationDefinitionNode,
)
from graphql.utilities import value_from_ast_untyped

from gqlmock.config import MockConfig
from gqlmock.engine.errors import DocumentAnalysisError, GraphQLRequestError
from gqlmock.engine.transport import get_graphql_input
from gqlmock.engine.types import (
    GraphQLVariables,
    OperationType,
    ParsedDocumentNode,
    ParsedGraphQLRequest,
)
from gqlmock.formats.http import InterceptedRequest
from gqlmock.helpers.console import format_message
from gqlmock.helpers.http import get_public_url

_parse_cached: Callable[[str], DocumentNode] | None = None


def configure_document_cache(maxsize: int | None = None) -> None:
    """Resize the per-query-text document cache (0 disables caching).

    The cache is shared by the whole package. Without ``maxsize`` the size
    comes from ``MockConfig.from_env()``; this happens once, on first parse.
    """
    global _parse_cached
    if maxsize is None:
        maxsize = MockConfig.from_env().document_cache_size
    _parse_cached = lru_cache(maxsize=maxsize)(gql_parse)


def _document_parser() -> Callable[[str], DocumentNode]:
    if _parse_cached is None:
        configure_document_cache()
    return cast(Callable[[str], DocumentNode], _parse_cached)


def parse_document(query: str) -> DocumentNode:
    """Parse query text into a DocumentNode, reusing documents parsed before.

    Raises ``DocumentAnalysisError`` on syntax errors and on query values
    that are not text.
    """
    if not isinstance(query, str):
        raise DocumentAnalysisError(
            [f"Must provide Source. Received: {json.dumps(query, default=repr)}."]
        )
    try:
        return _document_parser()(query)
    except GraphQLSyntaxError as e:
        raise DocumentAnalysisError([e.message]) from e


def split_definitions(
    document: DocumentNode,
) -> tuple[list[OperationDefinitionNode], dict[str, FragmentDefinitionNode]]:
    """Partition a document into its operations and its fragments by name."""
    operations: list[OperationDefinitionNode] = []
    fragments: dict[str, FragmentDefinitionNode] = {}
    for definition in document.definitions:
        if isinstance(definition, OperationDefinitionNode):
            operations.append(definition)
        elif isinstance(definition, FragmentDefinitionNode):
            fragments[definition.name.value] = definition
        else:
            name = getattr(getattr(definition, "name", None), "value", None)
            label = f'"{name}"' if name else definition.kind
            raise DocumentAnalysisError([f"The {label} definition is not executable."])
    return operations, fragments


def get_operation(
    document: DocumentNode, operation_name: str | None = None
) -> OperationDefinitionNode:
    """Resolve the single operation a request executes."""
    operations, _ = split_definitions(document)

    if not operations:
        raise DocumentAnalysisError(["Must provide an operation."])

    if len(operations) == 1:
        operation = operations[0]
        if operation_name and _name_of(operation) != operation_name:
            raise DocumentAnalysisError([f'Unknown operation named "{operation_name}".'])
        return operation

    if not operation_name:
        raise DocumentAnalysisError(
            ["Must provide operation name if query contains multiple operations."]
        )
    if any(op.name is None for op in operations):
        raise DocumentAnalysisError(
            ["This anonymous operation must be the only defined operation."]
        )
    for operation in operations:
        if _name_of(operation) == operation_name:
            return operation
    raise DocumentAnalysisError([f'Unknown operation named "{operation_name}".'])


def _name_of(operation: OperationDefinitionNode) -> str | None:
    return operation.name.value if operation.name else None


def coerce_variable_values(
    operation: OperationDefinitionNode,
    inputs: GraphQLVariables,
    schema: GraphQLSchema | None = None,
) -> GraphQLVariables:
    """Coerce request variables against the operation's variable definitions.

    With a schema, graphql-core performs full input coercion. Without one,
    only presence is checked: defaults fill in missing values and missing or
    null non-null variables are errors. Undeclared variables are dropped.
    """
    var_defs = operation.variable_definitions or ()

    if schema is not None:
        result = get_variable_values(schema, var_defs, inputs)
        if isinstance(result, list):
            raise DocumentAnalysisError([error.message for error in result])
        return cast(GraphQLVariables, result)

    errors: list[str] = []
    coerced: GraphQLVariables = {}
    for var_def in var_defs:
        name = var_def.variable.name.value
        is_non_null = isinstance(var_def.type, NonNullTypeNode)

        if name not in inputs:
            if var_def.default_value is not None:
                coerced[name] = value_from_ast_untyped(var_def.default_value, inputs)
            elif is_non_null:
                errors.append(
                    f'Variable "${name}" of required type "{print_ast(var_def.type)}"'
                    " was not provided."
                )
            continue

        value: Any = inputs[name]
        if value is None and is_non_null:
            errors.append(
                f'Variable "${name}" of non-null type "{print_ast(var_def.type)}"'
                " must not be null."
            )
            continue
        coerced[name] = value

    if errors:
        raise DocumentAnalysisError(errors)
    return coerced


def parse_document_node(
    document: DocumentNode,
    operation_name: str | None = None,
    variables: GraphQLVariables | None = None,
    *,
    schema: GraphQLSchema | None = None,
    coerce_variables: bool = True,
) -> ParsedDocumentNode:
    """Resolve the operation of a parsed document and coerce its variables.

    Pass ``coerce_variables=False`` to take ``variables`` as they are, e.g.
    when inspecting a document outside of any request.
    """
    operation = get_operation(document, operation_name)
    if coerce_variables:
        coerced = coerce_variable_values(operation, variables or {}, schema)
    else:
        coerced = dict(variables or {})

    return ParsedDocumentNode(
        operation_type=cast(OperationType, operation.operation.value),
        operation_name=_name_of(operation),
        variables=coerced,
    )


def parse_query(
    query: str,
    operation_name: str | None = None,
    variables: GraphQLVariables | None = None,
    schema: GraphQLSchema | None = None,
) -> ParsedGraphQLRequest:
    """Parse query text and resolve its operation.

    Raises ``DocumentAnalysisError`` when the text does not parse or does
    not resolve to exactly one operation.
    """
    document = parse_document(query)
    parsed = parse_document_node(document, operation_name, variables, schema=schema)
    return ParsedGraphQLRequest(
        operation_type=parsed.operation_type,
        operation_name=parsed.operation_name,
        variables=parsed.variables,
        document=document,
    )


def parse_graphql_request(
    request: InterceptedRequest, schema: GraphQLSchema | None = None
) -> ParsedGraphQLRequest | None:
    """Interpret an intercepted request as a GraphQL operation.

    Returns ``None`` when the request is not a GraphQL request at all.
    Raises ``GraphQLRequestError`` when it is one but the query is malformed,
    and ``MultipartRequestError`` when its uploads cannot be mapped.
    """
    graphql_input = get_graphql_input(request)
    if graphql_input is None or not graphql_input.query:
        return None

    try:
        return parse_query(
            graphql_input.query,
            graphql_input.operation_name,
            graphql_input.variables,
            schema,
        )
    except DocumentAnalysisError as e:
        raise GraphQLRequestError(
            format_message(
                'Failed to intercept a GraphQL request to "%s %s": cannot parse query.'
                " See the error message from the parser below.\n\n%s",
                request.method,
                get_public_url(request.url),
                e.message,
            ),
            request.method,
            request.url,
        ) from e
