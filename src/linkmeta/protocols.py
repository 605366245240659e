"""Protocol interfaces for swappable components.

MetadataService and AppState reference these protocols, not the concrete
implementations. Tests can hand in scripted fetchers or pre-seeded caches,
and a shared cache backend could replace the in-memory one without touching
the service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from linkmeta.fetcher import FetchMode
    from linkmeta.models.metadata import MetadataResult


class CacheProtocol(Protocol):
    """Interface for the metadata cache."""

    def lookup(self, url: str) -> MetadataResult | None: ...

    def store(self, url: str, result: MetadataResult) -> None: ...


class FetcherProtocol(Protocol):
    """Interface for the proxy fetch gateway."""

    async def fetch_best_effort(self, target_url: str, mode: FetchMode = ...) -> str | None: ...
