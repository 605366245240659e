"""Tool handler for extract_metadata.

Receives AppState, validates and normalises the URL, delegates to the
MetadataService and returns a structured dict. No MCP or FastMCP imports.
server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from linkmeta.errors import ErrorCode, LinkMetaError
from linkmeta.links import normalise_url, validate_url
from linkmeta.models.tools import ExtractMetadataInput, ExtractMetadataOutput

if TYPE_CHECKING:
    from linkmeta.state import AppState


async def handle(url: str, state: AppState) -> dict:
    """Handle an extract_metadata tool call."""
    log = structlog.get_logger().bind(tool="extract_metadata", url=url)
    log.info("handler_called")

    try:
        validated = ExtractMetadataInput(url=url.strip())
    except ValueError as exc:
        raise LinkMetaError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a non-empty URL of at most 2048 characters.",
            recoverable=False,
        ) from exc

    target = normalise_url(validated.url)
    if not validate_url(target):
        raise LinkMetaError(
            code=ErrorCode.INVALID_URL,
            message=f"Not a valid http(s) URL: {validated.url}",
            suggestion="Provide an absolute http:// or https:// URL with a host name.",
            recoverable=False,
        )

    if state.service is None:
        raise RuntimeError("MetadataService not initialized")

    result = await state.service.extract_metadata(target)
    log.info("extract_complete", title=result.title)

    output = ExtractMetadataOutput(url=target, **result.model_dump())
    return output.model_dump(mode="json")
