"""Streamable HTTP transport for the linkmeta MCP server."""

from __future__ import annotations

import re
import secrets
from typing import TYPE_CHECKING

import structlog
import uvicorn
from starlette.datastructures import Headers
from starlette.responses import Response

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP
    from starlette.types import ASGIApp, Receive, Scope, Send

    from linkmeta.config import Settings

log = structlog.get_logger()

_LOCALHOST_ORIGIN = re.compile(r"^https?://(localhost|127\.0\.0\.1|\[::1\])(:\d+)?$")


class LocalAccessMiddleware:
    """Pure ASGI guard in front of the MCP app.

    Rejects requests with a wrong bearer key (when auth is on) with 401 and
    browser requests from a non-local ``Origin`` with 403. Pure ASGI so SSE
    responses pass through unbuffered.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        auth_enabled: bool,
        auth_key: str | None = None,
    ) -> None:
        self.app = app
        self.auth_enabled = auth_enabled
        self.auth_key = auth_key

    def _authorised(self, headers: Headers) -> bool:
        if not self.auth_enabled:
            return True
        scheme, _, token = headers.get("authorization", "").partition(" ")
        return (
            scheme == "Bearer"
            and self.auth_key is not None
            and secrets.compare_digest(token, self.auth_key)
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        if not self._authorised(headers):
            await Response("Unauthorized", status_code=401)(scope, receive, send)
            return

        origin = headers.get("origin", "")
        if origin and not _LOCALHOST_ORIGIN.match(origin):
            log.warning("http_origin_rejected", origin=origin)
            await Response("Forbidden", status_code=403)(scope, receive, send)
            return

        await self.app(scope, receive, send)


def run_http_server(mcp: FastMCP, settings: Settings) -> None:
    """Serve ``mcp`` over Streamable HTTP with uvicorn."""
    http_log = log.bind(transport="http")

    auth_key: str | None = settings.server.auth_key or None
    if settings.server.auth_enabled and not auth_key:
        auth_key = secrets.token_urlsafe(32)
        http_log.warning("http_auth_key_auto_generated", auth_key=auth_key)
    if not settings.server.auth_enabled:
        http_log.warning("http_auth_disabled")

    app = LocalAccessMiddleware(
        mcp.streamable_http_app(),
        auth_enabled=settings.server.auth_enabled,
        auth_key=auth_key,
    )
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # structlog handles logging
    )
