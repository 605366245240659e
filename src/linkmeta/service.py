"""Metadata orchestration: cache, domain hints, platform branch, generic path.

``MetadataService.extract_metadata`` is the only entry point the rest of the
application needs. It never raises; every failure degrades to a fallback
result synthesised from the domain hint and the URL itself, and that result
is cached like any other so the same dead URL is not re-fetched within the
freshness window.

Concurrent misses for the same URL are not deduplicated: both calls fetch
and the last store wins. Results are idempotent best-effort data, so the
only cost is redundant proxy traffic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from linkmeta.config import Settings
from linkmeta.domains import domain_hint, hostname_of, is_social_post_host
from linkmeta.extractor import build_result, extract_fields, title_from_url
from linkmeta.fetcher import FetchMode
from linkmeta.models.metadata import DomainHint
from linkmeta.platforms import extract_platform, username_from_url

if TYPE_CHECKING:
    from linkmeta.models.metadata import MetadataResult
    from linkmeta.protocols import CacheProtocol, FetcherProtocol


class MetadataService:
    """Produces a MetadataResult for any URL, best effort."""

    def __init__(
        self,
        fetcher: FetcherProtocol,
        cache: CacheProtocol,
        settings: Settings | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._settings = settings or Settings()

    async def extract_metadata(self, url: str) -> MetadataResult:
        log = structlog.get_logger().bind(url=url)

        cached = self._cache.lookup(url)
        if cached is not None:
            log.info("cache_hit")
            return cached

        hostname = hostname_of(url)
        hint = domain_hint(hostname)

        try:
            if is_social_post_host(hostname, self._settings.platform.hosts):
                result = await self._try_platform(url, hint)
                if result is not None:
                    self._cache.store(url, result)
                    return result

            html = await self._fetcher.fetch_best_effort(url, mode=FetchMode.CORS)
            if not html:
                log.info("metadata_fallback", reason="no_content")
                return self._fallback(url, hint)

            result = extract_fields(
                html[: self._settings.extractor.html_scan_limit],
                url,
                hint,
                settings=self._settings.extractor,
                platform_hosts=self._settings.platform.hosts,
            )
            self._cache.store(url, result)
        except Exception:
            log.error("extraction_unexpected_error", exc_info=True)
            return self._fallback(url, hint)

        log.info("metadata_extracted", title=result.title)
        return result

    async def _try_platform(self, url: str, hint: DomainHint | None) -> MetadataResult | None:
        """Run the social-post extractor; any exception means "use the generic path"."""
        try:
            return await extract_platform(
                self._fetcher,
                url,
                hint,
                username_from_url(url),
                settings=self._settings.extractor,
                platform=self._settings.platform,
            )
        except Exception:
            structlog.get_logger().warning(
                "platform_extraction_failed", url=url, exc_info=True
            )
            return None

    def _fallback(self, url: str, hint: DomainHint | None) -> MetadataResult:
        """Synthesise a result without page content and cache it."""
        settings = self._settings.extractor
        hint = hint or DomainHint()
        result = build_result(
            hint.title
            or title_from_url(
                url, settings.title_max_length, platform_hosts=self._settings.platform.hosts
            ),
            hint.description or "",
            hint.thumbnail or settings.placeholder_thumbnail,
            settings,
        )
        try:
            self._cache.store(url, result)
        except Exception:
            structlog.get_logger().error("fallback_cache_store_failed", url=url, exc_info=True)
        return result
