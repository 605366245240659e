"""Link-management helpers that sit in front of metadata extraction.

URL and tag validation plus keyword-table tag suggestions. Pure business
logic, no I/O.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urlparse

from linkmeta.domains import strip_www

MAX_TAG_LENGTH = 15
MAX_SUGGESTIONS = 5
DEFAULT_TAG = "website"

# hostname substring → tags
TAG_SUGGESTIONS: dict[str, list[str]] = {
    "youtube.com": ["video", "youtube"],
    "twitter.com": ["twitter", "social"],
    "x.com": ["twitter", "social"],
    "github.com": ["code", "github"],
    "medium.com": ["article", "blog"],
    "dev.to": ["coding", "article"],
    "linkedin.com": ["professional", "social"],
    "instagram.com": ["image", "social"],
    "docs.google.com": ["document", "google"],
    "stackoverflow.com": ["coding", "tech"],
    "facebook.com": ["social", "facebook"],
    "tiktok.com": ["video", "social"],
    "pinterest.com": ["image", "social"],
    "reddit.com": ["social", "forum"],
    "dropbox.com": ["document", "storage"],
    "drive.google.com": ["document", "google"],
    "notion.so": ["document", "notes"],
    "trello.com": ["productivity", "tool"],
    "slack.com": ["communication", "tool"],
    "zoom.us": ["video", "meeting"],
    "meet.google.com": ["video", "meeting", "google"],
    "amazon.com": ["shopping", "ecommerce"],
    "ebay.com": ["shopping", "ecommerce"],
    "etsy.com": ["shopping", "handmade"],
    "coursera.org": ["education", "course"],
    "udemy.com": ["education", "course"],
    "wikipedia.org": ["reference", "information"],
    "nytimes.com": ["news", "article"],
    "cnn.com": ["news", "article"],
    "bbc.com": ["news", "article"],
    "spotify.com": ["music", "audio"],
    "soundcloud.com": ["music", "audio"],
    "behance.net": ["design", "portfolio"],
    "dribbble.com": ["design", "portfolio"],
}

# lowercase path substring → tags
PATH_KEYWORDS: dict[str, list[str]] = {
    "careers": ["job", "careers"],
    "jobs": ["job", "careers"],
    "apply": ["job", "careers"],
    "news": ["news", "article"],
    "blog": ["blog", "article"],
    "article": ["article"],
    "video": ["video"],
    "photo": ["image"],
    "gallery": ["image"],
    "docs": ["document"],
    "learn": ["education", "tutorial"],
    "course": ["education", "tutorial"],
    "shop": ["shopping", "ecommerce"],
    "store": ["shopping", "ecommerce"],
    "product": ["shopping", "ecommerce"],
}


@dataclass(frozen=True)
class TagValidation:
    is_valid: bool
    message: str | None = None


def normalise_url(raw: str) -> str:
    """Trim and default the scheme: ``"example.com"`` → ``"https://example.com"``."""
    url = raw.strip()
    if not url.lower().startswith(("http://", "https://")):
        url = "https://" + url
    return url


def validate_url(url: str) -> bool:
    """True for a non-blank absolute http(s) URL with a host."""
    if not url.strip():
        return False
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(hostname)


def validate_tag(tag: str) -> TagValidation:
    if not tag.strip():
        return TagValidation(False, "Tag cannot be empty")
    if len(tag) > MAX_TAG_LENGTH:
        return TagValidation(False, f"Tag must be {MAX_TAG_LENGTH} characters or less")
    return TagValidation(True)


def suggest_tags(url: str, existing: Iterable[str] = ()) -> list[str]:
    """Suggest up to five tags from the hostname and path keywords.

    Tags already on the link are never suggested. Falls back to
    ``"website"`` when nothing matches; unparseable URLs yield ``[]``.
    """
    try:
        parsed = urlparse(url)
        hostname = strip_www(parsed.hostname or "")
    except ValueError:
        return []
    if not hostname:
        return []

    taken = set(existing)
    path = parsed.path.lower()
    suggested: list[str] = []

    def _add(tags: Iterable[str]) -> None:
        for tag in tags:
            if tag not in taken and tag not in suggested:
                suggested.append(tag)

    for domain, tags in TAG_SUGGESTIONS.items():
        if domain in hostname:
            _add(tags)

    for keyword, tags in PATH_KEYWORDS.items():
        if keyword in path:
            _add(tags)

    if not suggested and DEFAULT_TAG not in taken:
        suggested = [DEFAULT_TAG]

    return suggested[:MAX_SUGGESTIONS]
