"""Shorthands for declaring GraphQL handlers.

    from gqlmock import gql

    github = gql.link("https://api.github.com/graphql")
    handlers = [
        gql.query("GetUser", resolve_user),
        github.mutation("Login", resolve_login),
        gql.operation(resolve_anything),
    ]
"""

from __future__ import annotations

import re

from graphql import GraphQLSchema

from gqlmock.config import MockConfig
from gqlmock.engine.types import ExpectedOperationType
from gqlmock.handlers.handler import GraphQLHandler, OperationSelector, Resolver
from gqlmock.helpers.http import Endpoint

_ANY_OPERATION = re.compile(".*")


class GraphQLLink:
    """Builds handlers bound to one endpoint (and optionally a schema).

    With a schema but no ``typename_field``, the discriminator field is read
    once from ``config``, or from ``MockConfig.from_env()`` without one.
    """

    def __init__(
        self,
        endpoint: Endpoint = "*",
        *,
        schema: GraphQLSchema | None = None,
        typename_field: str | None = None,
        config: MockConfig | None = None,
    ):
        self.endpoint = endpoint
        self.schema = schema
        self.config = config
        if typename_field is None and schema is not None:
            typename_field = (config or MockConfig.from_env()).typename_field
        self.typename_field = typename_field or "__typename"

    def _handler(
        self,
        operation_type: ExpectedOperationType,
        selector: OperationSelector,
        resolver: Resolver,
    ) -> GraphQLHandler:
        return GraphQLHandler(
            operation_type,
            selector,
            self.endpoint,
            resolver,
            schema=self.schema,
            typename_field=self.typename_field,
        )

    def query(self, selector: OperationSelector, resolver: Resolver) -> GraphQLHandler:
        return self._handler("query", selector, resolver)

    def mutation(self, selector: OperationSelector, resolver: Resolver) -> GraphQLHandler:
        return self._handler("mutation", selector, resolver)

    def subscription(self, selector: OperationSelector, resolver: Resolver) -> GraphQLHandler:
        return self._handler("subscription", selector, resolver)

    def operation(self, resolver: Resolver) -> GraphQLHandler:
        """Handle every GraphQL operation, named or anonymous, of any type."""
        return self._handler("all", _ANY_OPERATION, resolver)

    def link(
        self,
        endpoint: Endpoint,
        *,
        schema: GraphQLSchema | None = None,
        typename_field: str | None = None,
    ) -> GraphQLLink:
        """Return a builder scoped to another endpoint."""
        inherited = self.typename_field if self.schema is not None else None
        return GraphQLLink(
            endpoint,
            schema=schema or self.schema,
            typename_field=typename_field or inherited,
            config=self.config,
        )


gql = GraphQLLink()
