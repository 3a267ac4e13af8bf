"""Header construction for forwarded requests and relay responses."""

from collections.abc import Iterable

ALLOW_ORIGIN = "*"
ALLOW_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
DEFAULT_ALLOW_HEADERS = (
    "Accept, Authorization, Cache-Control, Content-Type, DNT, If-Modified-Since, "
    "Keep-Alive, Origin, User-Agent, X-Requested-With, Token, x-access-token"
)

# Recomputed for the new target and body encoding
DROP_HEADERS = frozenset({"content-length", "content-type", "host"})


class HeaderBuilder:
    """Build forwarded request headers and CORS response headers."""

    def build_forward_headers(
        self, headers: Iterable[tuple[str, str]]
    ) -> list[tuple[str, str]]:
        """Copy inbound headers, keeping duplicates, minus the drop-set."""
        return [
            (key.lower(), value)
            for key, value in headers
            if key.lower() not in DROP_HEADERS
        ]

    def build_cors_headers(
        self,
        request_allow_headers: str | None,
        content_type: str | None = None,
    ) -> dict[str, str]:
        """Build the headers attached to every relay response."""
        headers = {
            "Access-Control-Allow-Origin": ALLOW_ORIGIN,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": request_allow_headers or DEFAULT_ALLOW_HEADERS,
        }
        if content_type:
            headers["content-type"] = content_type
        return headers
