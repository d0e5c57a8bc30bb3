"""Runtime type resolution strategies for field projection.

Projection only needs to know the runtime type of a payload object to decide
which type-conditioned fragments apply to it. Without a schema nothing can be
resolved and every conditional branch applies; with a schema the type is read
from the object's discriminator field (``__typename``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from graphql import (
    GraphQLObjectType,
    GraphQLSchema,
    is_abstract_type,
    is_object_type,
)

from gqlmock.engine.errors import TypeInferenceError
from gqlmock.engine.types import OperationType


class TypeResolver(ABC):
    """Resolves the runtime type of payload objects during projection."""

    @abstractmethod
    def resolve_type(
        self, value: dict[str, Any], path: str, *, required: bool
    ) -> GraphQLObjectType | None:
        """Return the runtime type of ``value`` or ``None`` when unknown.

        ``required`` is set for nested objects that are projected through a
        selection set; implementations may raise ``TypeInferenceError`` then.
        """

    def root_type(self, operation_type: OperationType) -> GraphQLObjectType | None:
        return None

    def does_type_condition_match(
        self, type_condition: str, runtime_type: GraphQLObjectType
    ) -> bool:
        return type_condition == runtime_type.name


class SchemaLessTypeResolver(TypeResolver):
    """Never resolves a type, so all conditional fragments are combined.

    This is a known limitation rather than a bug: without a schema, fields
    of every ``... on Type`` branch that exist on the payload are picked.
    """

    def resolve_type(
        self, value: dict[str, Any], path: str, *, required: bool
    ) -> GraphQLObjectType | None:
        return None


class SchemaTypeResolver(TypeResolver):
    """Resolves runtime types from a discriminator field against a schema."""

    def __init__(self, schema: GraphQLSchema, typename_field: str = "__typename"):
        self.schema = schema
        self.typename_field = typename_field

    def resolve_type(
        self, value: dict[str, Any], path: str, *, required: bool
    ) -> GraphQLObjectType | None:
        typename = value.get(self.typename_field)
        named_type = self.schema.get_type(typename) if isinstance(typename, str) else None
        if is_object_type(named_type):
            return named_type  # type: ignore[return-value]
        if required:
            raise TypeInferenceError(
                f'Unable to infer the object type at "{path}"; ensure "{path}" includes'
                f' the "{self.typename_field}" field naming an object type of the schema.',
                path,
            )
        return None

    def root_type(self, operation_type: OperationType) -> GraphQLObjectType | None:
        return {
            "query": self.schema.query_type,
            "mutation": self.schema.mutation_type,
            "subscription": self.schema.subscription_type,
        }[operation_type]

    def does_type_condition_match(
        self, type_condition: str, runtime_type: GraphQLObjectType
    ) -> bool:
        condition_type = self.schema.get_type(type_condition)
        if condition_type is None:
            return False
        if condition_type is runtime_type:
            return True
        if is_abstract_type(condition_type):
            return self.schema.is_sub_type(condition_type, runtime_type)  # type: ignore[arg-type]
        return False
