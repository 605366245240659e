"""Tool handler for suggest_tags.

Receives AppState, validates input, delegates to linkmeta.links and returns
a structured dict. No MCP or FastMCP imports. server.py handles the MCP
wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from linkmeta.errors import ErrorCode, LinkMetaError
from linkmeta.links import normalise_url, suggest_tags, validate_tag, validate_url
from linkmeta.models.tools import SuggestTagsInput, SuggestTagsOutput

if TYPE_CHECKING:
    from linkmeta.state import AppState


async def handle(url: str, existing_tags: list[str], state: AppState) -> dict:
    """Handle a suggest_tags tool call."""
    log = structlog.get_logger().bind(tool="suggest_tags", url=url)
    log.info("handler_called")

    try:
        validated = SuggestTagsInput(url=url.strip(), existing_tags=existing_tags)
    except ValueError as exc:
        raise LinkMetaError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a non-empty URL and a list of tag strings.",
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

    for tag in validated.existing_tags:
        check = validate_tag(tag)
        if not check.is_valid:
            raise LinkMetaError(
                code=ErrorCode.INVALID_TAG,
                message=f"{check.message}: {tag!r}",
                suggestion="Remove empty tags and keep each tag short.",
                recoverable=False,
            )

    tags = suggest_tags(target, validated.existing_tags)
    log.info("suggest_complete", tag_count=len(tags))

    output = SuggestTagsOutput(url=target, tags=tags)
    return output.model_dump(mode="json")
