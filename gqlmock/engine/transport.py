"""Extract GraphQL query, operation name and variables from a request.

Three encodings are recognized:

- GET with ``query``, ``operationName`` and JSON ``variables`` URL parameters
- POST with a JSON body carrying the same fields
- POST multipart uploads following the GraphQL multipart request convention:
  an ``operations`` JSON field, a ``map`` JSON field of
  ``file key -> [dot path, ...]`` and one part per file key

Anything else is not GraphQL and yields ``None``.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, cast
from urllib.parse import parse_qs, urlparse

from gqlmock.engine.errors import MultipartRequestError
from gqlmock.engine.types import GraphQLInput, GraphQLVariables
from gqlmock.formats.http import InterceptedRequest
from gqlmock.helpers.json import json_parse


def get_graphql_input(request: InterceptedRequest) -> GraphQLInput | None:
    """Normalize an intercepted request into a GraphQLInput.

    Returns ``None`` when the request carries no recognizable GraphQL
    payload. Raises ``MultipartRequestError`` when a multipart body maps
    files onto variables that do not exist.
    """
    method = request.method.upper()
    if method == "GET":
        return _input_from_query_string(request.url)
    if method == "POST":
        body = _decode_body(request.body)
        if body is None:
            return None
        if body.get("query"):
            return _input_from_json_body(body)
        if body.get("operations"):
            return _input_from_multipart_body(body)
    return None


def _input_from_query_string(url: str) -> GraphQLInput | None:
    params = parse_qs(urlparse(url).query, keep_blank_values=True)
    query = _first(params, "query")
    if query is None:
        return None

    variables = json_parse(_first(params, "variables"))
    return GraphQLInput(
        query=query,
        operation_name=_first(params, "operationName"),
        variables=cast(GraphQLVariables, variables) if isinstance(variables, dict) else None,
    )


def _first(params: dict[str, list[str]], name: str) -> str | None:
    values = params.get(name)
    return values[0] if values else None


def _decode_body(body: Any) -> dict[str, Any] | None:
    """Return the request body as a mapping, decoding JSON text if needed."""
    if isinstance(body, (bytes, str)):
        body = json_parse(body)
    if isinstance(body, Mapping):
        return dict(cast(Mapping[str, Any], body))
    return None


def _input_from_json_body(body: dict[str, Any]) -> GraphQLInput:
    variables = body.get("variables")
    return GraphQLInput(
        query=body["query"],
        operation_name=body.get("operationName"),
        variables=cast(GraphQLVariables, variables) if isinstance(variables, dict) else None,
    )


def _input_from_multipart_body(body: dict[str, Any]) -> GraphQLInput | None:
    operations = body["operations"]
    files = {k: v for k, v in body.items() if k not in ("operations", "map")}

    parsed_operations = json_parse(operations) if isinstance(operations, (str, bytes)) else operations
    if not isinstance(parsed_operations, dict):
        return None
    parsed_operations = cast(dict[str, Any], parsed_operations)
    if not parsed_operations.get("query"):
        return None

    map_field = body.get("map")
    parsed_map = json_parse(map_field) if isinstance(map_field, (str, bytes)) else map_field
    file_map = cast(dict[str, list[str]], parsed_map) if isinstance(parsed_map, dict) else {}

    raw_variables = parsed_operations.get("variables")
    variables: GraphQLVariables = (
        extract_multipart_variables(cast(GraphQLVariables, raw_variables), file_map, files)
        if isinstance(raw_variables, dict)
        else {}
    )

    return GraphQLInput(
        query=parsed_operations["query"],
        operation_name=parsed_operations.get("operationName") or None,
        variables=variables,
    )


def extract_multipart_variables(
    variables: GraphQLVariables,
    file_map: dict[str, list[str]],
    files: dict[str, Any],
) -> GraphQLVariables:
    """Place uploaded files into ``variables`` at the paths given by ``file_map``.

    Paths are dot-separated and rooted at the operations object, e.g.
    ``variables.files.1``; numeric segments index into lists. ``variables``
    itself is left untouched and an updated copy is returned.

    >>> extract_multipart_variables({"file": None}, {"0": ["variables.file"]}, {"0": "f"})
    {'file': 'f'}
    """
    operations: dict[str, Any] = {"variables": copy.deepcopy(variables)}
    for key, dot_paths in file_map.items():
        if key not in files:
            raise MultipartRequestError(
                f"Given files do not have a key '{key}'.", {"key": key}
            )

        for dot_path in dot_paths:
            *parents, last = dot_path.split(".")
            target: Any = operations
            for segment in parents:
                target = _child(target, segment, dot_path)
            _assign(target, last, files[key], dot_path)

    return cast(GraphQLVariables, operations["variables"])


def _child(target: Any, segment: str, dot_path: str) -> Any:
    if isinstance(target, dict) and segment in target:
        return cast(dict[str, Any], target)[segment]
    if isinstance(target, list) and segment.isdigit() and int(segment) < len(target):
        return cast(list[Any], target)[int(segment)]
    raise MultipartRequestError(
        f"Property '{dot_path}' is not in operations.", {"path": dot_path}
    )


def _assign(target: Any, segment: str, value: Any, dot_path: str) -> None:
    if isinstance(target, dict):
        cast(dict[str, Any], target)[segment] = value
    elif isinstance(target, list) and segment.isdigit() and int(segment) < len(target):
        cast(list[Any], target)[int(segment)] = value
    else:
        raise MultipartRequestError(
            f"Property '{dot_path}' is not in operations.", {"path": dot_path}
        )
