"""ASGI app hosting the MCP Streamable HTTP endpoint."""

from __future__ import annotations

import contextlib
import logging
import secrets
from collections.abc import AsyncIterator, Awaitable, Callable

from starlette.applications import Starlette
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from .joplin_client import JoplinClient
from .mcp_server import create_mcp_server
from .settings import Settings

logger = logging.getLogger(__name__)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: Starlette, *, api_key: str) -> None:
        super().__init__(app)
        self._api_key = api_key

    @staticmethod
    def _bypass_auth(path: str) -> bool:
        # Health checks and OAuth discovery probes arrive before clients send custom headers.
        return path == "/health" or path.startswith("/.well-known/")

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if self._bypass_auth(request.url.path):
            return await call_next(request)
        presented = request.headers.get("x-api-key")
        if not presented or not secrets.compare_digest(presented, self._api_key):
            logger.warning("Rejected %s %s: missing or wrong X-API-Key", request.method, request.url.path)
            return JSONResponse({"error": "unauthorized"}, status_code=401)
        return await call_next(request)


async def health(request: Request) -> Response:
    joplin: JoplinClient = request.app.state.joplin
    return JSONResponse({"ok": True, "joplin": await joplin.ping()})


def create_app(settings: Settings | None = None) -> Starlette:
    settings = settings or Settings()
    mcp = create_mcp_server(settings)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        # Short timeout so /health stays quick when Joplin is closed.
        app.state.joplin = JoplinClient(
            base_url=str(settings.joplin_base_url),
            token=settings.joplin_token,
            timeout_seconds=min(settings.http_timeout_seconds, 2.0),
        )
        try:
            # Streamable HTTP transport uses a session manager.
            async with mcp.session_manager.run():
                yield
        finally:
            await app.state.joplin.aclose()

    app = Starlette(
        routes=[
            Route("/health", endpoint=health, methods=["GET"]),
        ],
        lifespan=lifespan,
    )

    # Mount MCP at /mcp (default for streamable-http when mounted at /).
    app.mount("/", mcp.streamable_http_app())
    app.add_middleware(ApiKeyMiddleware, api_key=settings.mcp_api_key)
    return app
