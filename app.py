"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_relay
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.router import RouteDecider
from core.transform import RequestTransformer
from services.relay_service import RelayService
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.upstream.max_connections,
            max_keepalive_connections=config.upstream.max_keepalive_connections,
        )
        client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            limits=limits,
            follow_redirects=config.upstream.follow_redirects,
            transport=transport,
        )
        app.state.relay_service = RelayService(
            logger=logger,
            upstream=UpstreamClient(client),
            decider=RouteDecider(),
            transformer=RequestTransformer(),
            header_builder=HeaderBuilder(),
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="CORS Relay",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    async def relay(request: Request):
        return await handle_relay(request)

    # methods=None matches every verb, custom ones included
    app.router.add_route("/{path:path}", relay)

    return app
