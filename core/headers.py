"""Response header construction for the client."""

import httpx

# Hop-by-hop headers that are never forwarded to the client
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "trailers",
    "transfer-encoding",
    "upgrade",
}

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store",
}

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE",
    "Access-Control-Allow-Headers": "*",
}


def without(headers: list[tuple[str, str]], *names: str) -> list[tuple[str, str]]:
    """Return headers minus every occurrence of the given names."""
    drop = {name.lower() for name in names}
    return [(key, value) for key, value in headers if key.lower() not in drop]


def replace(headers: list[tuple[str, str]], name: str, value: str) -> list[tuple[str, str]]:
    """Return headers with all occurrences of name replaced by a single value."""
    return without(headers, name) + [(name, value)]


class HeaderBuilder:
    """Build client-facing headers from origin responses."""

    def copy_origin_headers(self, headers: httpx.Headers) -> list[tuple[str, str]]:
        """Copy origin headers, keeping duplicates, minus hop-by-hop ones."""
        return [
            (key, value)
            for key, value in headers.multi_items()
            if key.lower() not in HOP_BY_HOP_HEADERS
        ]

    def finalize(self, headers: list[tuple[str, str]]) -> list[tuple[str, str]]:
        """Add no-cache and CORS headers, overriding origin values."""
        for name, value in {**NO_CACHE_HEADERS, **CORS_HEADERS}.items():
            headers = replace(headers, name, value)
        return headers
