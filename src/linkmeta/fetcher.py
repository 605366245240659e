"""Best-effort page fetcher that relays through public CORS proxies.

Target pages are never requested directly. Each configured proxy template is
tried in order, one at a time, until one returns a non-empty body. Every
failure mode of a single attempt (timeout, transport error, non-2xx status,
malformed JSON envelope) is logged and skipped; running out of proxies is a
normal outcome reported as ``None``.

The Fetcher receives an httpx.AsyncClient via constructor injection. The
server lifespan owns the client lifecycle.
"""

from __future__ import annotations

import asyncio
from enum import StrEnum
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import TYPE_CHECKING
from urllib.parse import quote, urlparse

import httpx
import structlog

from linkmeta.config import FetcherSettings

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


class FetchMode(StrEnum):
    """Request profile for a fetch attempt.

    ``NO_CORS`` mimics a browser "simple" request: only CORS-safelisted
    headers are sent and no browser User-Agent is claimed. Proxies often
    answer it with an empty or opaque body; that outcome is expected.
    """

    CORS = "cors"
    NO_CORS = "no-cors"


def build_http_client() -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup.

    Per-attempt deadlines are enforced by the Fetcher; the client timeout
    only guards against a request outliving its attempt. The cookie jar
    rejects every cookie, so no proxy can hand credentials to a later
    request on the shared client.
    """
    return httpx.AsyncClient(
        cookies=CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])),
        follow_redirects=True,
        timeout=httpx.Timeout(10.0),
        limits=httpx.Limits(
            max_connections=20,
            max_keepalive_connections=10,
        ),
    )


def build_proxy_url(template: str, target_url: str) -> str:
    """Substitute the fully percent-encoded target into a ``{url}`` template."""
    return template.replace("{url}", quote(target_url, safe=""))


def _proxy_name(template: str) -> str:
    return urlparse(template).hostname or template


class Fetcher:
    """Sequential proxy gateway implementing FetcherProtocol."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: FetcherSettings | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or FetcherSettings()

    @property
    def proxy_templates(self) -> Sequence[str]:
        return self._settings.proxy_templates

    def request_headers(self, mode: FetchMode) -> dict[str, str]:
        headers = {
            "Accept": self._settings.accept,
            "Accept-Language": self._settings.accept_language,
        }
        if mode == FetchMode.NO_CORS:
            headers["Sec-Fetch-Mode"] = "no-cors"
        else:
            headers["User-Agent"] = self._settings.user_agent
        return headers

    async def fetch_best_effort(
        self,
        target_url: str,
        mode: FetchMode = FetchMode.CORS,
    ) -> str | None:
        """Return the first non-empty HTML body any proxy yields, else ``None``."""
        for template in self.proxy_templates:
            proxy = _proxy_name(template)
            html = await self._attempt(build_proxy_url(template, target_url), proxy, mode)
            if html:
                log.info(
                    "proxy_fetch_complete",
                    url=target_url,
                    proxy=proxy,
                    mode=str(mode),
                    content_length=len(html),
                )
                return html

        log.info("proxy_all_failed", url=target_url, mode=str(mode))
        return None

    async def _attempt(self, proxy_url: str, proxy: str, mode: FetchMode) -> str | None:
        """Run one proxy attempt. Never raises for network or payload problems."""
        timeout = self._settings.timeout_seconds
        try:
            response = await asyncio.wait_for(
                self._client.get(proxy_url, headers=self.request_headers(mode)),
                timeout=timeout,
            )
        except TimeoutError:
            log.info("proxy_attempt_failed", proxy=proxy, reason="timeout", timeout=timeout)
            return None
        except httpx.HTTPError as exc:
            log.info("proxy_attempt_failed", proxy=proxy, reason="network", error=str(exc))
            return None

        if not response.is_success:
            log.info(
                "proxy_attempt_failed",
                proxy=proxy,
                reason="status",
                status_code=response.status_code,
            )
            return None

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return response.text

        # JSON-wrapping proxies put the page in a "contents" field.
        try:
            envelope = response.json()
        except ValueError:
            log.info("proxy_attempt_failed", proxy=proxy, reason="invalid_json")
            return None
        contents = envelope.get("contents") if isinstance(envelope, dict) else None
        if not isinstance(contents, str):
            log.info("proxy_attempt_failed", proxy=proxy, reason="missing_contents")
            return None
        return contents
