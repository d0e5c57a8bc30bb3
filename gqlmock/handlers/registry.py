"""Registry of GraphQL handlers consulted for each intercepted request."""

from __future__ import annotations

from gqlmock.config import MockConfig
from gqlmock.formats.http import InterceptedRequest, MockedResponse
from gqlmock.handlers.handler import GraphQLHandler, HandlerExecutionResult


class HandlerRegistry:
    """Ordered handlers; the first one producing a response wins.

    Owned by the interception layer, which must not register handlers while
    a request is being handled.
    """

    def __init__(self, *initial_handlers: GraphQLHandler, config: MockConfig | None = None):
        self.config = config or MockConfig.from_env()
        self._initial_handlers: list[GraphQLHandler] = list(initial_handlers)
        self._handlers: list[GraphQLHandler] = list(initial_handlers)

    def use(self, *handlers: GraphQLHandler) -> None:
        """Prepend runtime handlers so they take precedence over existing ones."""
        self._handlers = [*handlers, *self._handlers]

    def reset_handlers(self, *next_handlers: GraphQLHandler) -> None:
        """Replace all handlers, by default with the initial ones."""
        self._handlers = list(next_handlers) if next_handlers else list(self._initial_handlers)

    def list_handlers(self) -> tuple[GraphQLHandler, ...]:
        return tuple(self._handlers)

    def run(self, request: InterceptedRequest) -> HandlerExecutionResult | None:
        """Run the request through the handlers until one responds."""
        for handler in self._handlers:
            result = handler.run(request)
            if result is None or result.response is None:
                continue
            if not self.config.quiet:
                handler.log(result)
            return result
        return None

    def handle(self, request: InterceptedRequest) -> MockedResponse | None:
        """Return the mocked response for a request, or ``None`` to pass it through."""
        result = self.run(request)
        return result.response if result else None
