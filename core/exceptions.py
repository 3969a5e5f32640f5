"""Custom exception hierarchy for the gateway.

Every pipeline stage raises its own error type; HTTP status codes are only
attached here and read at the outermost handler.
"""


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    status_code: int = 500


class ConfigurationError(GatewayError):
    """Raised when configuration is missing or invalid."""


class DecodeError(GatewayError):
    """Raised when the request path is not valid percent-encoded text."""

    status_code = 400


class UpstreamError(GatewayError):
    """Raised when the origin cannot be reached or addressed.

    Attributes:
        message: Error message
        target: Target URL the request was addressed to (optional)
    """

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target


class InvalidTargetError(UpstreamError):
    """Raised when the decoded path cannot be parsed as an absolute URL."""


class UpstreamTimeoutError(UpstreamError):
    """Raised when an origin request times out."""


class UpstreamConnectionError(UpstreamError):
    """Raised when unable to connect to the origin (DNS, TLS, refused)."""


class TransformError(GatewayError):
    """Raised when rewriting an origin response fails."""
