"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_exchange(
        self,
        method: str,
        target: str,
        status: int,
        kind: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> None: ...
    def log_error(self, status: int, message: str, target: str | None = None) -> None: ...
