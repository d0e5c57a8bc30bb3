"""Mock GraphQL responses shaped like the operations that request them."""

from __future__ import annotations

from gqlmock.config import MockConfig as MockConfig
from gqlmock.engine.document import parse_graphql_request as parse_graphql_request
from gqlmock.engine.errors import GraphQLMockError as GraphQLMockError
from gqlmock.engine.projection import project as project
from gqlmock.engine.runtime_types import SchemaTypeResolver as SchemaTypeResolver
from gqlmock.formats.http import InterceptedRequest as InterceptedRequest
from gqlmock.formats.http import MockedResponse as MockedResponse
from gqlmock.formats.http import UploadedFile as UploadedFile
from gqlmock.handlers.builders import gql as gql
from gqlmock.handlers.handler import GraphQLHandler as GraphQLHandler
from gqlmock.handlers.registry import HandlerRegistry as HandlerRegistry

__all__ = [
    "GraphQLHandler",
    "GraphQLMockError",
    "HandlerRegistry",
    "InterceptedRequest",
    "MockConfig",
    "MockedResponse",
    "SchemaTypeResolver",
    "UploadedFile",
    "gql",
    "parse_graphql_request",
    "project",
]
