"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from core.headers import HeaderBuilder
from core.request_types import RelayFailure, RelayOutcome
from ui.log_utils import write_incoming_log


async def handle_relay(request: Request) -> Response | StreamingResponse:
    """Relay any request, always answering with CORS headers."""
    write_incoming_log(request.method, request.url.path, dict(request.headers))

    relay_service = request.app.state.relay_service
    outcome = await relay_service.run(request)
    return to_response(outcome, request.headers.get("access-control-allow-headers"))


def to_response(
    outcome: RelayOutcome,
    request_allow_headers: str | None,
) -> Response | StreamingResponse:
    """Convert a pipeline outcome into the wire response."""
    headers = HeaderBuilder().build_cors_headers(
        request_allow_headers, outcome.content_type
    )

    if isinstance(outcome, RelayFailure):
        return Response(
            content=outcome.render(),
            status_code=outcome.status,
            headers=headers,
        )

    if outcome.stream is not None:
        return StreamingResponse(
            outcome.stream,
            status_code=outcome.status,
            headers=headers,
            background=BackgroundTask(outcome.close) if outcome.close else None,
        )

    return Response(
        content=outcome.body,
        status_code=outcome.status,
        headers=headers,
    )
