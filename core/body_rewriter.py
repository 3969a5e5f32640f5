"""Link rewriting inside HTML documents.

Only href, src and action attribute values are touched. Matching is textual
and case-sensitive; URLs elsewhere in the markup are left alone.
"""

import re

from core.urls import encode_component

# href="/path" but not href="//host"
ROOT_RELATIVE_PATTERN = re.compile(r"""((?:href|src|action)=["'])/(?!/)""")
# href="//host/path"
PROTOCOL_RELATIVE_PATTERN = re.compile(r"""((?:href|src|action)=["'])//([^/"']+)([^"']*)""")


class HtmlRewriter:
    """Route root-relative and protocol-relative links through the gateway."""

    def __init__(self, keep_protocol_relative_path: bool = False) -> None:
        self.keep_protocol_relative_path = keep_protocol_relative_path

    def rewrite(self, text: str, origin: str) -> str:
        """Rewrite links in an HTML document served from origin."""
        encoded_origin = encode_component(origin)
        text = ROOT_RELATIVE_PATTERN.sub(
            lambda m: f"{m.group(1)}/{encoded_origin}/",
            text,
        )
        return PROTOCOL_RELATIVE_PATTERN.sub(self._protocol_relative, text)

    def _protocol_relative(self, match: re.Match[str]) -> str:
        prefix, host, rest = match.groups()
        value = "/" + encode_component(f"https://{host}")
        if self.keep_protocol_relative_path:
            value += rest
        return prefix + value
