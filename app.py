"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_proxy, handle_root
from core.config import Config
from core.protocols import RequestLogger
from core.sanitize import RequestSanitizer
from services.gateway import GatewayService
from services.upstream import UpstreamClient, build_client

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    # Built once; the rule table is read-only for the life of the process
    sanitizer = RequestSanitizer(
        config.rule_set(),
        internal_prefix=config.gateway.internal_header_prefix,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = build_client(config.upstream, transport=transport)
        app.state.gateway_service = GatewayService(
            config=config,
            logger=logger,
            upstream=UpstreamClient(client),
            sanitizer=sanitizer,
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="Path Gateway",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.api_route("/", methods=PROXY_METHODS)
    async def landing_page(request: Request):
        return await handle_root(request)

    @app.api_route("/{path:path}", methods=PROXY_METHODS)
    async def proxy(request: Request, path: str):
        return await handle_proxy(request, logger)

    return app
