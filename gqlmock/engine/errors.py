"""Errors raised while interpreting GraphQL requests and shaping payloads."""

from __future__ import annotations

from typing import Any


class GraphQLMockError(Exception):
    """Base class for all errors raised by gqlmock."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}


class DocumentAnalysisError(GraphQLMockError):
    """A document could not be resolved to exactly one operation."""

    def __init__(self, messages: list[str]):
        super().__init__("\n".join(messages), {"messages": messages})
        self.messages = messages


class GraphQLRequestError(GraphQLMockError):
    """A GraphQL request was recognized but its query is malformed."""

    def __init__(self, message: str, method: str, url: str):
        super().__init__(message, {"method": method, "url": url})
        self.method = method
        self.url = url


class OperationNotFoundError(GraphQLMockError):
    """Projection was asked for an operation the document does not define."""


class TypeInferenceError(GraphQLMockError):
    """The runtime type of a payload object could not be determined."""

    def __init__(self, message: str, path: str):
        super().__init__(message, {"path": path})
        self.path = path


class MultipartRequestError(GraphQLMockError):
    """A multipart request references files or variables that do not exist."""


class HandlerDefinitionError(GraphQLMockError):
    """A handler was constructed with an unusable operation selector."""
