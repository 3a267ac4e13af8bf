"""Request classification - decides between the help page and forwarding."""

import re
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

from core.exceptions import TargetDecodeError

HELP_ONLY_PATHS = frozenset({"favicon.ico", "robots.txt"})
MIN_TARGET_LENGTH = 3

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class RouteDecision:
    """Routing decision for a request."""

    route: str
    candidate: str
    invalid: bool = False

    @property
    def is_help(self) -> bool:
        return self.route == "help"

    @property
    def status(self) -> int:
        """Status code used when the help page is served."""
        return 400 if self.invalid else 200


def extract_candidate(url: str) -> str:
    """Return the percent-decoded text after ``scheme://host/``.

    The query string is part of the candidate, so
    ``https://relay.dev/https://a.com/x?q=1`` yields ``https://a.com/x?q=1``.

    Raises:
        TargetDecodeError: a percent escape is truncated or decodes to
            invalid UTF-8.
    """
    scheme_end = url.find("://")
    rest = url[scheme_end + 3 :] if scheme_end >= 0 else url
    slash = rest.find("/")
    if slash < 0:
        return ""
    encoded = rest[slash + 1 :]
    if _BAD_ESCAPE.search(encoded):
        raise TargetDecodeError(f"Malformed percent escape in target: {encoded}")
    try:
        return unquote_to_bytes(encoded).decode("utf-8")
    except UnicodeDecodeError as e:
        raise TargetDecodeError(f"Target is not valid UTF-8: {encoded}") from e


def fix_url(url: str) -> str:
    """Normalize a candidate into an absolute URL."""
    if "://" in url:
        return url
    if ":/" in url:
        # "https://" collapses to "https:/" when proxies merge slashes
        return url.replace(":/", "://", 1)
    return "http://" + url


class RouteDecider:
    """Decide whether a request gets the help page or is forwarded."""

    def decide(self, method: str, candidate: str) -> RouteDecision:
        """Return the route for an inbound method and decoded candidate."""
        if self._wants_help(method, candidate):
            invalid = not (method == "OPTIONS" or len(candidate) == 0)
            return RouteDecision(route="help", candidate=candidate, invalid=invalid)
        return RouteDecision(route="proxy", candidate=candidate)

    def _wants_help(self, method: str, candidate: str) -> bool:
        return (
            method == "OPTIONS"
            or len(candidate) < MIN_TARGET_LENGTH
            or "." not in candidate
            or candidate in HELP_ONLY_PATHS
        )
