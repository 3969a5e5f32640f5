"""Per-hostname request header override rules."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from core.exceptions import ConfigurationError

WILDCARD = "*"
KEEP = "KEEP"
DELETE = "DELETE"

DEFAULT_HEADER_RULES: dict[str, dict[str, str]] = {
    "i.pximg.net": {
        "Origin": DELETE,
        "Referer": "https://www.pixiv.net/",
    },
    "i-cf.pximg.net": {
        "Origin": DELETE,
        "Referer": "https://www.pixiv.net/",
    },
    WILDCARD: {
        "Origin": DELETE,
        "Referer": DELETE,
    },
}


@dataclass(frozen=True)
class Keep:
    """Leave the header untouched."""


@dataclass(frozen=True)
class Delete:
    """Remove the header from the outgoing request."""


@dataclass(frozen=True)
class SetTo:
    """Set the header to a fixed value."""

    value: str


Directive = Keep | Delete | SetTo


def parse_directive(value: str) -> Directive:
    """Parse a configured directive string."""
    if value == KEEP:
        return Keep()
    if value == DELETE:
        return Delete()
    return SetTo(value)


@dataclass(frozen=True)
class HeaderRuleSet:
    """Immutable hostname -> {header: directive} table with wildcard fallback."""

    rules: Mapping[str, Mapping[str, Directive]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Mapping[str, str]]) -> "HeaderRuleSet":
        """Build a rule set from configuration strings."""
        rules: dict[str, Mapping[str, Directive]] = {}
        for hostname, headers in raw.items():
            if not hostname:
                raise ConfigurationError("Header rule hostname must not be empty")
            directives = {}
            for name, value in headers.items():
                if not name:
                    raise ConfigurationError(f"Empty header name in rule for {hostname}")
                directives[name] = parse_directive(value)
            rules[hostname.lower()] = MappingProxyType(directives)
        return cls(MappingProxyType(rules))

    @classmethod
    def default(cls) -> "HeaderRuleSet":
        return cls.from_mapping(DEFAULT_HEADER_RULES)

    def for_host(self, hostname: str) -> Mapping[str, Directive]:
        """Return the directives for a hostname, falling back to the wildcard."""
        hostname = hostname.lower()
        if hostname in self.rules:
            return self.rules[hostname]
        return self.rules.get(WILDCARD, MappingProxyType({}))
