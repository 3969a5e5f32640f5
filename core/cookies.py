"""Set-Cookie rewriting so cookies stick to the gateway instead of the origin."""

SET_COOKIE = "set-cookie"


def _attribute_key(segment: str) -> str:
    return segment.split("=", 1)[0].strip().lower()


class CookieRewriter:
    """Rewrite Domain and Path attributes of Set-Cookie directives."""

    def __init__(self, domain: str = "") -> None:
        self.domain = domain

    def rewrite(self, cookie: str) -> str:
        """Rewrite a single Set-Cookie value.

        The first segment is the cookie pair itself; only the segments after
        it are matched as attributes, by key and case-insensitively.
        """
        segments = cookie.split(";")
        has_domain = False
        has_path = False

        for index in range(1, len(segments)):
            segment = segments[index]
            key = _attribute_key(segment)
            if key == "domain":
                has_domain = True
                name = segment.split("=", 1)[0]
                segments[index] = f"{name}={self.domain}"
            elif key == "path":
                has_path = True

        rewritten = ";".join(segments)
        if not has_domain:
            rewritten += f"; Domain={self.domain}"
        if not has_path:
            rewritten += "; Path=/"
        return rewritten

    def rewrite_headers(self, headers: list[tuple[str, str]]) -> list[tuple[str, str]]:
        """Rewrite every Set-Cookie header, one output per input."""
        return [
            (name, self.rewrite(value)) if name.lower() == SET_COOKIE else (name, value)
            for name, value in headers
        ]
