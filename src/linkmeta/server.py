"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Start the correct transport (stdio or HTTP)
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import linkmeta.tools.extract_metadata as t_extract
import linkmeta.tools.suggest_tags as t_suggest
from linkmeta import __version__
from linkmeta.cache import MetadataCache
from linkmeta.config import Settings
from linkmeta.errors import LinkMetaError
from linkmeta.fetcher import Fetcher, build_http_client
from linkmeta.service import MetadataService
from linkmeta.state import AppState
from linkmeta.transport import run_http_server

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout carries the MCP JSON-RPC stream in stdio mode
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def build_state(settings: Settings) -> AppState:
    """Wire the HTTP client, cache, fetcher and service into one AppState."""
    http_client = build_http_client()
    cache = MetadataCache(
        max_entries=settings.cache.max_entries,
        duration_seconds=settings.cache.duration_seconds,
    )
    fetcher = Fetcher(http_client, settings.fetcher)
    return AppState(
        settings=settings,
        http_client=http_client,
        cache=cache,
        fetcher=fetcher,
        service=MetadataService(fetcher, cache, settings),
    )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    state = build_state(settings)
    log.info(
        "server_started",
        version=__version__,
        transport=settings.server.transport,
        proxies=len(settings.fetcher.proxy_templates),
        cache_max_entries=settings.cache.max_entries,
    )

    try:
        yield state
    finally:
        if state.http_client is not None:
            await state.http_client.aclose()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("linkmeta", lifespan=lifespan)
# FastMCP doesn't expose a version kwarg; set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: LinkMetaError) -> CallToolResult:
    """Convert a LinkMetaError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


def _log_tool_error(tool: str, exc: LinkMetaError) -> None:
    log.warning(
        "tool_error",
        tool=tool,
        code=exc.code,
        message=exc.message,
        recoverable=exc.recoverable,
    )


@mcp.tool()
async def extract_metadata(url: str, ctx: Context) -> object:
    """Extract a title, description and thumbnail URL for a web page.

    Always succeeds for a valid http(s) URL: when the page cannot be fetched
    the result is built from known-site defaults and the URL itself.
    """
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_extract.handle(url, state)
    except LinkMetaError as exc:
        _log_tool_error("extract_metadata", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="extract_metadata", exc_info=True)
        raise


@mcp.tool()
async def suggest_tags(
    url: str, ctx: Context, existing_tags: list[str] | None = None
) -> object:
    """Suggest up to five tags for a link based on its site and path."""
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_suggest.handle(url, existing_tags or [], state)
    except LinkMetaError as exc:
        _log_tool_error("suggest_tags", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="suggest_tags", exc_info=True)
        raise


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()

    if settings.server.transport == "http":
        _setup_logging(settings)
        run_http_server(mcp, settings)
        return

    mcp.run()


if __name__ == "__main__":
    main()
