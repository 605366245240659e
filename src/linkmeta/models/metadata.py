from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class MetadataResult(BaseModel):
    """Title, description and thumbnail extracted (or synthesised) for a URL."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    thumbnail: str  # Absolute URL or the placeholder sentinel


class DomainHint(BaseModel):
    """Partial metadata pre-associated with a known hostname."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    description: str | None = None
    thumbnail: str | None = None


class CacheEntry(BaseModel):
    """Cached extraction result. Owned by MetadataCache, never returned."""

    data: MetadataResult
    timestamp: float  # Clock reading at store time (monotonic seconds by default)
