"""Request sanitization before the origin fetch."""

import httpx

from core.header_rules import Delete, HeaderRuleSet, Keep, SetTo
from core.request_types import IncomingRequest, OutgoingRequest

DEFAULT_INTERNAL_PREFIX = "cf-"
BODYLESS_METHODS = {"GET", "HEAD"}

# Headers owned by the HTTP client or meaningful only for a single hop
CLIENT_OWNED_HEADERS = {
    "host",
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


class RequestSanitizer:
    """Strip internal headers and apply per-host header rules."""

    def __init__(
        self,
        rules: HeaderRuleSet,
        internal_prefix: str = DEFAULT_INTERNAL_PREFIX,
    ) -> None:
        self._rules = rules
        self._internal_prefix = internal_prefix.lower()

    def prepare(self, incoming: IncomingRequest, target: httpx.URL) -> OutgoingRequest:
        """Build the outgoing request for a target URL."""
        method = incoming.method.upper()
        has_body = method not in BODYLESS_METHODS

        headers = self.filter_headers(incoming.headers, keep_content_length=has_body)
        self.apply_rules(headers, target.host)

        return OutgoingRequest(
            method=method,
            url=target,
            headers=headers,
            body=incoming.body if has_body else None,
        )

    def filter_headers(
        self,
        headers: list[tuple[str, str]],
        *,
        keep_content_length: bool = True,
    ) -> httpx.Headers:
        """Drop internal and client-owned headers."""
        kept = []
        for name, value in headers:
            name_lower = name.lower()
            if self._internal_prefix and name_lower.startswith(self._internal_prefix):
                continue
            if name_lower in CLIENT_OWNED_HEADERS:
                continue
            if name_lower == "content-length" and not keep_content_length:
                continue
            kept.append((name, value))
        return httpx.Headers(kept)

    def apply_rules(self, headers: httpx.Headers, hostname: str) -> None:
        """Apply the matching header rule to headers in place."""
        for name, directive in self._rules.for_host(hostname).items():
            if isinstance(directive, Keep):
                continue
            if isinstance(directive, Delete):
                headers.pop(name, None)
            elif isinstance(directive, SetTo):
                headers[name] = directive.value
