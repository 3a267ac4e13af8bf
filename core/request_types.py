"""Shared request and result data types."""

import json
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field

from core.transform import EncodedBody

ERROR_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for a forwarded request."""

    method: str
    target_url: str
    headers: list[tuple[str, str]]
    body: EncodedBody | None = None


@dataclass
class RelayResult:
    """Successful pipeline outcome (help page or forwarded response)."""

    status: int = 200
    status_text: str = "OK"
    content_type: str | None = None
    body: bytes | str | None = None
    stream: AsyncIterator[bytes] | None = None
    close: Callable[[], Awaitable[None]] | None = field(default=None, repr=False)


@dataclass(frozen=True)
class RelayFailure:
    """Failed pipeline outcome, rendered as a 500 JSON error."""

    detail: str
    status: int = 500
    content_type: str = ERROR_CONTENT_TYPE

    def render(self) -> str:
        return json.dumps({"code": -1, "msg": self.detail})


RelayOutcome = RelayResult | RelayFailure
