"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_help(self, method: str, candidate: str, status: int) -> None: ...
    def log_forward(
        self,
        method: str,
        target: str,
        status: int,
        *,
        headers: dict[str, str],
    ) -> None: ...
    def log_error(self, target: str, status: int, message: str) -> None: ...
