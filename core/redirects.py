"""Redirect re-targeting through the gateway."""

import httpx

from core.exceptions import TransformError
from core.headers import replace
from core.urls import proxy_path

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


def find_location(headers: list[tuple[str, str]]) -> str | None:
    for name, value in headers:
        if name.lower() == "location":
            return value
    return None


def rewrite_location(location: str, base_url: httpx.URL) -> str:
    """Resolve a Location value against the origin URL and route it through the gateway.

    Absolute and relative values go through the same resolution step.
    """
    try:
        resolved = base_url.join(location)
    except httpx.InvalidURL as e:
        raise TransformError(f"Invalid redirect location: {location}") from e
    return proxy_path(resolved)


def rewrite_redirect_headers(
    headers: list[tuple[str, str]],
    base_url: httpx.URL,
) -> list[tuple[str, str]]:
    """Replace the Location header, leaving headers unchanged when absent."""
    location = find_location(headers)
    if not location:
        return headers
    return replace(headers, "Location", rewrite_location(location, base_url))
