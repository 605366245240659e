from __future__ import annotations

from linkmeta.models.metadata import CacheEntry, DomainHint, MetadataResult
from linkmeta.models.tools import (
    ExtractMetadataInput,
    ExtractMetadataOutput,
    SuggestTagsInput,
    SuggestTagsOutput,
)

__all__ = [
    # metadata
    "MetadataResult",
    "DomainHint",
    "CacheEntry",
    # tools
    "ExtractMetadataInput",
    "ExtractMetadataOutput",
    "SuggestTagsInput",
    "SuggestTagsOutput",
]
