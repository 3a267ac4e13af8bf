"""Relay pipeline: classify, normalize, transform, dispatch."""

import traceback

from starlette.requests import Request

from core.headers import HeaderBuilder
from core.help_page import render_help
from core.protocols import RequestLogger
from core.request_types import PreparedRequest, RelayFailure, RelayOutcome, RelayResult
from core.router import RouteDecider, RouteDecision, extract_candidate, fix_url
from core.transform import RequestTransformer
from services.upstream import UpstreamClient

HELP_CONTENT_TYPE = "text/html"


def inbound_url(request: Request) -> str:
    """Rebuild the inbound URL from the undecoded request path."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.url.path
    url = f"{request.url.scheme}://{request.url.netloc}{path}"
    if request.url.query:
        url += "?" + request.url.query
    return url


class RelayService:
    """Turn one inbound request into a relay outcome."""

    def __init__(
        self,
        logger: RequestLogger,
        upstream: UpstreamClient,
        decider: RouteDecider,
        transformer: RequestTransformer,
        header_builder: HeaderBuilder,
    ) -> None:
        self._logger = logger
        self._upstream = upstream
        self._decider = decider
        self._transformer = transformer
        self._headers = header_builder

    async def run(self, request: Request) -> RelayOutcome:
        """Run the pipeline; failures come back as RelayFailure, never raised."""
        target = request.url.path
        try:
            candidate = extract_candidate(inbound_url(request))
            decision = self._decider.decide(request.method, candidate)
            if decision.is_help:
                return self._help(request, decision)

            target = fix_url(decision.candidate)
            prepared = await self.prepare(request, target)
            result = await self._upstream.send(prepared)
        except Exception as e:
            detail = "".join(traceback.format_exception(e))
            self._logger.log_error(target, 500, str(e) or type(e).__name__)
            return RelayFailure(detail=detail)

        self._logger.log_forward(
            prepared.method,
            target,
            result.status,
            headers=dict(prepared.headers),
        )
        return result

    async def prepare(self, request: Request, target: str) -> PreparedRequest:
        """Build the forwarded request for a normalized target."""
        headers = self._headers.build_forward_headers(request.headers.items())
        body = await self._transformer.encode_body(
            request, request.headers.get("content-type")
        )
        return PreparedRequest(request.method, target, headers, body)

    def _help(self, request: Request, decision: RouteDecision) -> RelayResult:
        self._logger.log_help(request.method, decision.candidate, decision.status)
        return RelayResult(
            status=decision.status,
            status_text="OK",
            content_type=HELP_CONTENT_TYPE,
            body=render_help(request.url.scheme, request.url.hostname or ""),
        )
