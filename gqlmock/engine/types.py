"""Types passed between the request interpretation stages.

1. Transport output: GraphQLInput, one per intercepted request
2. Analysis output: ParsedDocumentNode / ParsedGraphQLRequest
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from graphql.language import DocumentNode

OperationType = Literal["query", "mutation", "subscription"]
ExpectedOperationType = Literal["query", "mutation", "subscription", "all"]

GraphQLVariables = dict[str, Any]


@dataclass
class GraphQLInput:
    """The GraphQL fields extracted from a request, before parsing."""

    query: str | None
    operation_name: str | None = None
    variables: GraphQLVariables | None = None


@dataclass
class ParsedDocumentNode:
    """The single operation resolved from a document."""

    operation_type: OperationType
    operation_name: str | None = None  # None for anonymous operations
    variables: GraphQLVariables = field(default_factory=lambda: dict[str, Any]())


@dataclass
class ParsedGraphQLRequest(ParsedDocumentNode):
    """A resolved operation together with the document it was drawn from."""

    document: DocumentNode = field(default_factory=lambda: DocumentNode(definitions=()))
