"""Social-post (Twitter/X) extraction.

Post pages rarely survive generic extraction: the proxies get a login wall
or a JavaScript shell. This path tries the gateway in no-cors mode, reads
the few meta tags the platform does emit, and otherwise builds a result
around the author's handle taken from the URL path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

import structlog

from linkmeta.config import ExtractorSettings, PlatformSettings
from linkmeta.extractor import (
    OG_DESCRIPTION,
    OG_IMAGE,
    OG_TITLE,
    TWITTER_CREATOR,
    build_result,
    first_match,
    resolve_url,
    title_from_url,
)
from linkmeta.fetcher import FetchMode
from linkmeta.models.metadata import DomainHint

if TYPE_CHECKING:
    from linkmeta.models.metadata import MetadataResult
    from linkmeta.protocols import FetcherProtocol

log = structlog.get_logger()


def username_from_url(url: str) -> str | None:
    """Return the post author's handle (first path segment), without ``@``."""
    try:
        path = urlparse(url).path
    except ValueError:
        return None
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return None
    username = unquote(segments[0]).lstrip("@")
    return username or None


def platform_title(username: str, hint: DomainHint, platform: PlatformSettings) -> str:
    return f"@{username} on {hint.title or platform.default_name}"


async def extract_platform(
    fetcher: FetcherProtocol,
    page_url: str,
    hint: DomainHint | None,
    username: str | None,
    *,
    settings: ExtractorSettings | None = None,
    platform: PlatformSettings | None = None,
) -> MetadataResult | None:
    """Best-effort extraction for a social post.

    Returns ``None`` only when nothing could be fetched *and* no username is
    known, leaving the caller to try the generic path.
    """
    settings = settings or ExtractorSettings()
    platform = platform or PlatformSettings()
    hint = hint or DomainHint()
    placeholder = settings.placeholder_thumbnail

    html = await fetcher.fetch_best_effort(page_url, mode=FetchMode.NO_CORS)

    if not html:
        if not username:
            log.info("platform_extraction_empty", url=page_url)
            return None
        return build_result(
            platform_title(username, hint, platform),
            hint.description or f"Tweet by @{username}",
            hint.thumbnail or placeholder,
            settings,
        )

    html = html[: settings.html_scan_limit]

    title = first_match((TWITTER_CREATOR, OG_TITLE), html)
    if not title:
        if username:
            title = platform_title(username, hint, platform)
        else:
            title = title_from_url(
                page_url, settings.title_max_length, platform_hosts=platform.hosts
            )

    description = OG_DESCRIPTION.match(html) or hint.description or "Tweet"

    image = OG_IMAGE.match(html)
    if image:
        thumbnail = resolve_url(image, page_url, placeholder)
    else:
        thumbnail = hint.thumbnail or placeholder

    return build_result(title, description, thumbnail, settings)
