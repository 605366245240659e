"""Shared test fixtures for the linkmeta test suite."""

from __future__ import annotations

import pytest

from linkmeta.cache import MetadataCache
from linkmeta.config import FetcherSettings, Settings
from linkmeta.fetcher import FetchMode

# Three proxies keep the URL-building tests readable; one JSON-wrapping.
TEST_PROXIES = [
    "https://proxy-one.test/raw?url={url}",
    "https://proxy-two.test/get?url={url}",
    "https://proxy-three.test/{url}",
]


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedFetcher:
    """FetcherProtocol stand-in returning canned HTML per request mode."""

    def __init__(
        self,
        html: str | None = None,
        *,
        no_cors_html: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self.html = html
        self.no_cors_html = no_cors_html
        self.error = error
        self.calls: list[tuple[str, FetchMode]] = []

    async def fetch_best_effort(
        self, target_url: str, mode: FetchMode = FetchMode.CORS
    ) -> str | None:
        self.calls.append((target_url, mode))
        if self.error is not None:
            raise self.error
        if mode == FetchMode.NO_CORS:
            return self.no_cors_html
        return self.html


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> MetadataCache:
    """Fresh cache per test with the default limits and a controllable clock."""
    return MetadataCache(max_entries=100, duration_seconds=3600, clock=clock)


@pytest.fixture()
def settings() -> Settings:
    """Default settings with a short, deterministic proxy list."""
    return Settings(fetcher=FetcherSettings(proxy_templates=list(TEST_PROXIES)))


@pytest.fixture()
def make_fetcher() -> type[ScriptedFetcher]:
    """Factory for scripted fetchers: ``make_fetcher(html, no_cors_html=..., error=...)``."""
    return ScriptedFetcher
