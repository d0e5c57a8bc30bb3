"""Runtime configuration, read from the environment (and a .env file)."""

from __future__ import annotations

import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class MockConfig(BaseModel):
    quiet: bool = False  # suppress the per-request log line
    typename_field: str = "__typename"
    document_cache_size: int = Field(default=128, ge=0)

    @classmethod
    def from_env(cls) -> MockConfig:
        """Build a config from ``GQLMOCK_*`` environment variables.

        A ``.env`` file in the working directory is loaded first; variables
        already set in the environment take precedence over it.
        """
        load_dotenv(find_dotenv(usecwd=True))
        values: dict[str, object] = {}
        quiet = os.environ.get("GQLMOCK_QUIET")
        if quiet is not None:
            values["quiet"] = quiet.strip().lower() in _TRUTHY
        typename_field = os.environ.get("GQLMOCK_TYPENAME_FIELD")
        if typename_field:
            values["typename_field"] = typename_field
        cache_size = os.environ.get("GQLMOCK_DOCUMENT_CACHE_SIZE")
        if cache_size:
            values["document_cache_size"] = cache_size
        return cls.model_validate(values)
