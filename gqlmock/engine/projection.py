"""Project mock payloads onto the fields selected by a GraphQL operation.

The payload is walked together with the operation's selection sets, the way
an executor collects fields, so that the result holds exactly the selected
response keys. Payloads with reference cycles are fine: recursion follows the
finite query, never the payload's own references.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

from graphql import GraphQLIncludeDirective, GraphQLObjectType, GraphQLSkipDirective
from graphql.execution.values import get_directive_values
from graphql.language.ast import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    OperationDefinitionNode,
    SelectionSetNode,
)
from graphql.utilities import value_from_ast_untyped

from gqlmock.engine.document import split_definitions
from gqlmock.engine.errors import OperationNotFoundError
from gqlmock.engine.runtime_types import SchemaLessTypeResolver, TypeResolver
from gqlmock.engine.types import GraphQLVariables, OperationType

ROOT_PATH = "data"


@dataclass
class _Projection:
    fragments: dict[str, FragmentDefinitionNode]
    variables: GraphQLVariables
    type_resolver: TypeResolver


def project(
    payload: dict[str, Any],
    document: DocumentNode,
    operation_name: str | None = None,
    variables: GraphQLVariables | None = None,
    type_resolver: TypeResolver | None = None,
) -> dict[str, Any]:
    """Restrict ``payload`` to the fields selected by an operation of ``document``.

    Without ``operation_name`` the document's anonymous operation is used.
    Fields absent from the payload are omitted, never defaulted to null.
    Without a schema-aware ``type_resolver``, type-conditioned fragments are
    all combined. The payload itself is never modified.

    >>> from graphql import parse
    >>> project({"name": "gqlmock", "version": 1}, parse("query { name }"))
    {'name': 'gqlmock'}
    """
    operation, fragments = find_operation(document, operation_name)
    projection = _Projection(
        fragments=fragments,
        variables=_with_default_values(operation, variables or {}),
        type_resolver=type_resolver or SchemaLessTypeResolver(),
    )

    runtime_type = projection.type_resolver.resolve_type(
        payload, ROOT_PATH, required=False
    ) or projection.type_resolver.root_type(cast(OperationType, operation.operation.value))
    return _pick_object(projection, payload, [operation.selection_set], runtime_type, ROOT_PATH)


def find_operation(
    document: DocumentNode, operation_name: str | None
) -> tuple[OperationDefinitionNode, dict[str, FragmentDefinitionNode]]:
    """Find an operation by name (``None`` for the anonymous one)."""
    operations, fragments = split_definitions(document)
    for operation in operations:
        name = operation.name.value if operation.name else None
        if name == (operation_name or None):
            return operation, fragments

    if operation_name:
        raise OperationNotFoundError(f'Unable to find operation named "{operation_name}"')
    raise OperationNotFoundError(
        "Unable to find anonymous query, pass operationName to choose an operation"
    )


def _with_default_values(
    operation: OperationDefinitionNode, variables: GraphQLVariables
) -> GraphQLVariables:
    """Fill in declared default values for variables that were not given."""
    merged = dict(variables)
    for var_def in operation.variable_definitions or ():
        name = var_def.variable.name.value
        if name not in merged and var_def.default_value is not None:
            merged[name] = value_from_ast_untyped(var_def.default_value, variables)
    return merged


def collect_fields(
    fragments: dict[str, FragmentDefinitionNode],
    variables: GraphQLVariables,
    selection_sets: list[SelectionSetNode],
    runtime_type: GraphQLObjectType | None = None,
    type_resolver: TypeResolver | None = None,
) -> dict[str, list[FieldNode]]:
    """Collect the fields of selection sets, grouped by response key.

    Fragment spreads and inline fragments are flattened, ``@skip`` and
    ``@include`` are applied, and fields sharing a response key are grouped
    so their sub-selections can be merged.
    """
    projection = _Projection(
        fragments=fragments,
        variables=variables,
        type_resolver=type_resolver or SchemaLessTypeResolver(),
    )
    fields: dict[str, list[FieldNode]] = {}
    visited_fragments: set[str] = set()
    for selection_set in selection_sets:
        _collect_fields(projection, runtime_type, selection_set, fields, visited_fragments)
    return fields


def _collect_fields(
    projection: _Projection,
    runtime_type: GraphQLObjectType | None,
    selection_set: SelectionSetNode,
    fields: dict[str, list[FieldNode]],
    visited_fragments: set[str],
) -> None:
    for selection in selection_set.selections:
        if isinstance(selection, FieldNode):
            if not _should_include_node(selection, projection.variables):
                continue
            fields.setdefault(_response_key(selection), []).append(selection)
        elif isinstance(selection, InlineFragmentNode):
            if not _should_include_node(
                selection, projection.variables
            ) or not _does_fragment_condition_match(projection, selection, runtime_type):
                continue
            _collect_fields(
                projection, runtime_type, selection.selection_set, fields, visited_fragments
            )
        elif isinstance(selection, FragmentSpreadNode):
            name = selection.name.value
            if name in visited_fragments or not _should_include_node(
                selection, projection.variables
            ):
                continue
            visited_fragments.add(name)
            fragment = projection.fragments.get(name)
            if fragment is None or not _does_fragment_condition_match(
                projection, fragment, runtime_type
            ):
                continue
            _collect_fields(
                projection, runtime_type, fragment.selection_set, fields, visited_fragments
            )
        else:
            raise TypeError(f"Unexpected selection node: {selection.kind}")


def _should_include_node(
    node: FieldNode | FragmentSpreadNode | InlineFragmentNode,
    variables: GraphQLVariables,
) -> bool:
    """Evaluate ``@skip(if:)`` and ``@include(if:)``; skip wins over include."""
    skip = get_directive_values(GraphQLSkipDirective, node, variables)
    if skip and skip["if"] is True:
        return False

    include = get_directive_values(GraphQLIncludeDirective, node, variables)
    if include and include["if"] is False:
        return False

    return True


def _does_fragment_condition_match(
    projection: _Projection,
    fragment: FragmentDefinitionNode | InlineFragmentNode,
    runtime_type: GraphQLObjectType | None,
) -> bool:
    type_condition = fragment.type_condition
    if type_condition is None or runtime_type is None:
        return True
    return projection.type_resolver.does_type_condition_match(
        type_condition.name.value, runtime_type
    )


def _response_key(node: FieldNode) -> str:
    return node.alias.value if node.alias else node.name.value


def _pick_object(
    projection: _Projection,
    data: dict[str, Any],
    selection_sets: list[SelectionSetNode],
    runtime_type: GraphQLObjectType | None,
    path: str,
) -> dict[str, Any]:
    fields: dict[str, list[FieldNode]] = {}
    visited_fragments: set[str] = set()
    for selection_set in selection_sets:
        _collect_fields(projection, runtime_type, selection_set, fields, visited_fragments)

    picked: dict[str, Any] = {}
    for key, field_nodes in fields.items():
        # Aliased fields fall back to the field name when mocks omit the alias.
        field_name = field_nodes[0].name.value
        if key in data:
            value = data[key]
        elif field_name in data:
            value = data[field_name]
        else:
            continue

        sub_selection_sets = [node.selection_set for node in field_nodes if node.selection_set]
        picked[key] = _pick_value(projection, value, sub_selection_sets, f"{path}.{key}")
    return picked


def _pick_value(
    projection: _Projection,
    value: Any,
    selection_sets: list[SelectionSetNode],
    path: str,
) -> Any:
    if not selection_sets or value is None:
        return value

    if isinstance(value, list):
        return [
            _pick_value(projection, item, selection_sets, f"{path}[{index}]")
            for index, item in enumerate(cast(list[Any], value))
        ]

    if isinstance(value, dict):
        data = cast(dict[str, Any], value)
        runtime_type = projection.type_resolver.resolve_type(data, path, required=True)
        return _pick_object(projection, data, selection_sets, runtime_type, path)

    return value
