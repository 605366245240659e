"""Known-domain table and hostname helpers.

The table serves both as a fast hint (e.g. a platform logo when the page has
no og:image) and as the last-resort source for fallback synthesis.
"""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlparse

from linkmeta.models.metadata import DomainHint

_YOUTUBE = DomainHint(
    title="YouTube",
    description="YouTube - Watch, Listen, Stream",
    thumbnail="https://www.youtube.com/img/desktop/yt_1200.png",
)
_TWITTER_ICON = "https://abs.twimg.com/responsive-web/web/icon-default.77d25fda.png"

# Insertion order matters: the first key contained in the hostname wins.
KNOWN_DOMAINS: dict[str, DomainHint] = {
    "youtube.com": _YOUTUBE,
    "youtu.be": _YOUTUBE,
    "twitter.com": DomainHint(
        title="Twitter",
        description="Twitter - What's happening",
        thumbnail=_TWITTER_ICON,
    ),
    "x.com": DomainHint(
        title="X (formerly Twitter)",
        description="X - What's happening",
        thumbnail=_TWITTER_ICON,
    ),
    "github.com": DomainHint(
        thumbnail="https://github.githubassets.com/assets/github-logo-55c5b9a1fe3.png",
    ),
    "linkedin.com": DomainHint(
        thumbnail="https://static.licdn.com/sc/h/3m4tgpbdz7gbldapvef2lzjhx",
    ),
    "postman.com": DomainHint(
        thumbnail="https://www.postman.com/_ar-assets/images/postman-logo-horizontal-black.svg",
    ),
    "medium.com": DomainHint(
        thumbnail="https://miro.medium.com/max/8978/1*s986xIGqhfsN8U--09_AdA.png",
    ),
    "dev.to": DomainHint(
        thumbnail=(
            "https://dev-to-uploads.s3.amazonaws.com/uploads/logos/"
            "resized_logo_UQww2soKuUsjaOGNB38o.png"
        ),
    ),
    "stackoverflow.com": DomainHint(
        thumbnail="https://cdn.sstatic.net/Sites/stackoverflow/Img/apple-touch-icon.png",
    ),
    "npmjs.com": DomainHint(
        thumbnail="https://www.npmjs.com/static/images/logos/npm-logo.png",
    ),
}


def strip_www(hostname: str) -> str:
    """``'www.github.com'`` → ``'github.com'``. Other subdomains are kept."""
    return hostname[4:] if hostname.startswith("www.") else hostname


def hostname_of(url: str) -> str:
    """Return the lowercase, ``www.``-stripped hostname, or ``""`` if unparseable."""
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return strip_www(hostname)


def domain_hint(
    hostname: str,
    table: dict[str, DomainHint] = KNOWN_DOMAINS,
) -> DomainHint | None:
    """Return the hint of the first table key contained in ``hostname``.

    Substring containment rather than equality, so ``m.youtube.com`` and
    ``gist.github.com`` pick up their parent's hint.
    """
    if not hostname:
        return None
    for key, hint in table.items():
        if key in hostname:
            return hint
    return None


def is_social_post_host(hostname: str, hosts: Iterable[str]) -> bool:
    """True when ``hostname`` is one of ``hosts`` or a subdomain of one."""
    hostname = strip_www(hostname.lower())
    return any(hostname == host or hostname.endswith("." + host) for host in hosts)
