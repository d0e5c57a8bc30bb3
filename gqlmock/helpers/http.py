"""HTTP header and URL utilities."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from gqlmock.formats.http import Header

# Handler endpoint: "*", a literal or patterned URL/path, or a compiled regex.
Endpoint = str | re.Pattern[str]


def set_header(headers: list[Header], name: str, value: str) -> list[Header]:
    """Return a copy of ``headers`` with ``name`` set to ``value``."""
    name_lower = name.lower()
    kept = [h for h in headers if h.name.lower() != name_lower]
    return [*kept, Header(name=name, value=value)]


def get_public_url(url: str) -> str:
    """Return the URL without its query string and fragment.

    >>> get_public_url("https://api.example.com/graphql?query={a}")
    'https://api.example.com/graphql'
    """
    parsed = urlparse(url)
    return parsed._replace(query="", fragment="").geturl()


def _pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Convert an endpoint pattern like ``https://*.example.com/:version/graphql`` to a regex.

    ``*`` matches anything, ``:name`` and ``{name}`` match a single path
    segment. A trailing slash is optional. Port numbers (``:8080``) are
    literal since parameter names must start with a letter.
    """
    tokens = re.split(r"(\*|:[A-Za-z_]\w*|\{[^}]+\})", pattern.rstrip("/"))

    regex = ""
    for token in tokens:
        if token == "*":
            regex += ".*"
        elif token.startswith(":") or token.startswith("{"):
            regex += r"[^/]+"
        else:
            regex += re.escape(token)

    return re.compile(f"^{regex}/?$")


def match_request_url(url: str, endpoint: Endpoint) -> bool:
    """Check whether a request URL matches a handler endpoint.

    String endpoints starting with ``/`` are matched against the URL path
    only, other strings against the public URL. Compiled patterns are
    searched in the full URL.
    """
    if isinstance(endpoint, re.Pattern):
        return endpoint.search(url) is not None

    if endpoint == "*":
        return True

    public_url = get_public_url(url)
    target = urlparse(public_url).path if endpoint.startswith("/") else public_url
    return _pattern_to_regex(endpoint).match(target) is not None
