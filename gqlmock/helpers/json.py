"""Tolerant JSON parsing and deep merging of JSON-like values."""

from __future__ import annotations

import json
from typing import Any, cast


def json_parse(value: str | bytes | None) -> Any:
    """Parse JSON text, returning ``None`` on empty or invalid input."""
    if not value:
        return None
    try:
        return json.loads(value)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def merge_right(left: dict[str, Any], right: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``right`` into a copy of ``left``.

    Nested dicts merge key by key; lists and other values from ``right``
    replace those of ``left``. Neither argument is modified.

    >>> merge_right({"data": {"a": 1, "b": [1]}}, {"data": {"b": [2]}})
    {'data': {'a': 1, 'b': [2]}}
    """
    result = dict(left)
    for key, right_value in right.items():
        left_value = result.get(key)
        if isinstance(left_value, dict) and isinstance(right_value, dict):
            result[key] = merge_right(
                cast(dict[str, Any], left_value), cast(dict[str, Any], right_value)
            )
        else:
            result[key] = right_value
    return result
