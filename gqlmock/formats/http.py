"""Pydantic models for intercepted requests and mocked responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Header(BaseModel):
    name: str
    value: str


class UploadedFile(BaseModel):
    """A file part of a multipart request body."""

    name: str
    content_type: str = "application/octet-stream"
    content: bytes = b""


class InterceptedRequest(BaseModel):
    """A request handed over by the interception layer.

    ``body`` is whatever the interception layer decoded: a mapping for JSON
    and multipart bodies (file parts as ``UploadedFile``), raw ``bytes`` or
    ``str`` otherwise, or ``None`` when the request had no body.
    """

    method: str = "GET"
    url: str
    headers: list[Header] = Field(default_factory=list)
    body: Any = None


class MockedResponse(BaseModel):
    status: int = 200
    status_text: str = "OK"
    headers: list[Header] = Field(default_factory=list)
    body: str | None = None
