"""HTTP dispatch of forwarded requests with streaming pass-through."""

from collections.abc import AsyncIterator

import httpx

from core.exceptions import UpstreamConnectionError, UpstreamTimeoutError
from core.request_types import PreparedRequest, RelayResult


async def _relay_stream(response: httpx.Response) -> AsyncIterator[bytes]:
    """Yield the body chunk by chunk, closing the response however it ends."""
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    finally:
        await response.aclose()


class UpstreamClient:
    """Send forwarded requests and stream the target's response back."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, prepared: PreparedRequest) -> RelayResult:
        """Issue a single request to the target, no retries."""
        headers = list(prepared.headers)
        kwargs = {}
        if prepared.body is not None:
            kwargs = prepared.body.as_request_kwargs()
            if prepared.body.content_type:
                headers.append(("content-type", prepared.body.content_type))

        req = self._client.build_request(
            prepared.method,
            prepared.target_url,
            headers=headers,
            **kwargs,
        )
        try:
            response = await self._client.send(req, stream=True)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"Upstream timeout: {e}", target=prepared.target_url
            ) from e
        except httpx.RequestError as e:
            raise UpstreamConnectionError(
                f"Upstream connection error: {e}", target=prepared.target_url
            ) from e

        return RelayResult(
            status=response.status_code,
            status_text=response.reason_phrase,
            content_type=response.headers.get("content-type"),
            stream=_relay_stream(response),
            close=response.aclose,
        )
