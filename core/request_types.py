"""Shared request and response data types."""

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from enum import Enum

import httpx


class DispatchKind(str, Enum):
    """Which rewriting path produced a response."""

    REDIRECT = "redirect"
    HTML = "html"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True)
class IncomingRequest:
    """Client request as seen by the gateway pipeline."""

    method: str
    raw_path: str
    query: str
    scheme: str
    headers: list[tuple[str, str]]
    body: AsyncIterator[bytes] | None = None


@dataclass(frozen=True)
class OutgoingRequest:
    """Prepared data for the origin request."""

    method: str
    url: httpx.URL
    headers: httpx.Headers
    body: AsyncIterator[bytes] | None = None


@dataclass
class RewrittenResponse:
    """Final response handed back to the HTTP layer."""

    status_code: int
    reason: str
    kind: DispatchKind
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes | AsyncIterator[bytes] = b""
