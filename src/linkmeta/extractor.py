"""Regex field extraction over raw HTML.

Each field (title, description, thumbnail) has its own ordered rule chain.
Rules are evaluated top to bottom and the first one yielding a non-empty,
sanitised value wins; rules never look at each other's results. Only a
bounded prefix of the document is scanned.

Pure functions, no I/O.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import unquote, urljoin, urlparse

from linkmeta.config import PLACEHOLDER_THUMBNAIL, ExtractorSettings
from linkmeta.domains import is_social_post_host, strip_www
from linkmeta.models.metadata import DomainHint, MetadataResult

DEFAULT_PLATFORM_HOSTS: tuple[str, ...] = ("twitter.com", "x.com")

_FLAGS = re.IGNORECASE | re.DOTALL
# Attribute value character: stops at the closing quote and never leaves the tag.
_QUOTED_VALUE = r"(?:(?!(?P=q))[^>])"


@dataclass(frozen=True)
class Rule:
    """One named step of a field chain: patterns exposing a ``value`` group."""

    name: str
    patterns: tuple[re.Pattern[str], ...]

    def match(self, html: str) -> str:
        for pattern in self.patterns:
            found = pattern.search(html)
            if found:
                value = clean_text(found.group("value"))
                if value:
                    return value
        return ""


def _meta_rule(name: str, key: str) -> Rule:
    """Match ``<meta property|name="key" content="...">`` in either attribute order."""
    key_attr = rf"""\b(?:property|name)\s*=\s*["']{re.escape(key)}["']"""
    content_attr = (
        rf"""(?<![\w-])content\s*=\s*(?P<q>["'])(?P<value>{_QUOTED_VALUE}*)(?P=q)"""
    )
    return Rule(
        name,
        (
            re.compile(rf"<meta\s[^>]*?{key_attr}[^>]*?{content_attr}", _FLAGS),
            re.compile(rf"<meta\s[^>]*?{content_attr}[^>]*?{key_attr}", _FLAGS),
        ),
    )


def _tag_rule(name: str, pattern: str) -> Rule:
    return Rule(name, (re.compile(pattern, _FLAGS),))


OG_TITLE = _meta_rule("og_title", "og:title")
OG_DESCRIPTION = _meta_rule("og_description", "og:description")
OG_IMAGE = _meta_rule("og_image", "og:image")
TWITTER_TITLE = _meta_rule("twitter_title", "twitter:title")
TWITTER_DESCRIPTION = _meta_rule("twitter_description", "twitter:description")
TWITTER_IMAGE = _meta_rule("twitter_image", "twitter:image")
TWITTER_CREATOR = _meta_rule("twitter_creator", "twitter:creator")
META_DESCRIPTION = _meta_rule("meta_description", "description")

TITLE_RULES: tuple[Rule, ...] = (
    OG_TITLE,
    TWITTER_TITLE,
    _tag_rule("title_element", r"<title(?:\s[^>]*)?>(?P<value>[^<]*)</title>"),
    _tag_rule("first_h1", r"<h1(?:\s[^>]*)?>(?P<value>[^<]+)</h1>"),
)

DESCRIPTION_RULES: tuple[Rule, ...] = (
    OG_DESCRIPTION,
    TWITTER_DESCRIPTION,
    META_DESCRIPTION,
    _tag_rule("first_paragraph", r"<p(?:\s[^>]*)?>(?P<value>[^<]{20,})</p>"),
)

THUMBNAIL_RULES: tuple[Rule, ...] = (
    OG_IMAGE,
    TWITTER_IMAGE,
    _tag_rule(
        "first_img",
        rf"""<img\s[^>]*?(?<![\w-])src\s*=\s*(?P<q>["'])(?P<value>{_QUOTED_VALUE}+)(?P=q)""",
    ),
)


def first_match(rules: Iterable[Rule], html: str) -> str:
    """Return the value of the first rule that matches, or ``""``."""
    for rule in rules:
        value = rule.match(html)
        if value:
            return value
    return ""


_ENTITY_OR_SPACE = re.compile(r"&nbsp;|&amp;|&#39;|&quot;|\s+")
_ENTITIES = {"&nbsp;": " ", "&amp;": "&", "&#39;": "'", "&quot;": '"'}


def clean_text(text: str | None) -> str:
    """Decode the common entities, collapse whitespace, trim.

    Single pass, so ``&amp;quot;`` becomes ``&quot;`` and is not decoded twice.
    """
    if not text:
        return ""
    return _ENTITY_OR_SPACE.sub(lambda m: _ENTITIES.get(m.group(0), " "), text).strip()


def resolve_url(src: str, base: str, placeholder: str = PLACEHOLDER_THUMBNAIL) -> str:
    """Resolve an image reference against the page URL.

    Anything that does not end up as an absolute http(s) URL is replaced by
    ``placeholder``.
    """
    if not src:
        return placeholder
    if src.startswith(("http://", "https://")):
        return src
    try:
        resolved = urljoin(base, src)
        parsed = urlparse(resolved)
    except ValueError:
        return placeholder
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return placeholder
    return resolved


_EXTENSION = re.compile(r"\.\w+$")


def title_from_url(
    url: str,
    max_length: int = 100,
    *,
    platform_hosts: Iterable[str] = DEFAULT_PLATFORM_HOSTS,
) -> str:
    """Build a readable title from the URL alone.

    ``https://example.com/my-cool_article.html`` → ``"My Cool Article"``.
    Never raises: input that is not an absolute URL comes back truncated.
    """
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname or ""
    except ValueError:
        return url[:max_length]
    if not parsed.scheme or not hostname:
        return url[:max_length]

    segments = [segment for segment in parsed.path.split("/") if segment]

    if segments and is_social_post_host(hostname, platform_hosts):
        username = unquote(segments[0]).lstrip("@")
        return f"@{username} on Twitter"[:max_length]

    if segments:
        words = _EXTENSION.sub("", unquote(segments[-1])).replace("-", " ").replace("_", " ")
        title = " ".join(word[:1].upper() + word[1:] for word in words.split())
        if title:
            return title[:max_length]

    return strip_www(hostname)[:max_length]


def build_result(
    title: str,
    description: str,
    thumbnail: str,
    settings: ExtractorSettings,
) -> MetadataResult:
    """Final construction point: the only place titles and descriptions are truncated."""
    return MetadataResult(
        title=title[: settings.title_max_length],
        description=description[: settings.description_max_length],
        thumbnail=thumbnail or settings.placeholder_thumbnail,
    )


def extract_fields(
    html: str,
    page_url: str,
    hint: DomainHint | None = None,
    *,
    settings: ExtractorSettings | None = None,
    platform_hosts: Iterable[str] = DEFAULT_PLATFORM_HOSTS,
) -> MetadataResult:
    """Run the three field chains over ``html`` and fill gaps from ``hint``."""
    settings = settings or ExtractorSettings()
    hint = hint or DomainHint()
    html = html[: settings.html_scan_limit]

    title = (
        first_match(TITLE_RULES, html)
        or hint.title
        or title_from_url(page_url, settings.title_max_length, platform_hosts=platform_hosts)
    )
    description = first_match(DESCRIPTION_RULES, html) or hint.description or ""

    image = first_match(THUMBNAIL_RULES, html)
    if image:
        thumbnail = resolve_url(image, page_url, settings.placeholder_thumbnail)
    else:
        thumbnail = hint.thumbnail or settings.placeholder_thumbnail

    return build_result(title, description, thumbnail, settings)
