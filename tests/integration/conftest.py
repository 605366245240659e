"""Integration test fixtures.

Provides a fully wired AppState with a real httpx client (intercepted by
respx in the tests), an in-memory cache on a fake clock and the short proxy
list from tests/conftest.py.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import httpx
import pytest

from linkmeta.cache import MetadataCache
from linkmeta.fetcher import Fetcher
from linkmeta.service import MetadataService
from linkmeta.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

    from linkmeta.config import Settings


@pytest.fixture()
def subprocess_env(tmp_path: "Path") -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Forces stdio transport and points the config directory at an empty tmp
    directory so a local linkmeta.yaml cannot leak into the run.
    """
    env = os.environ.copy()
    env["LINKMETA__SERVER__TRANSPORT"] = "stdio"
    env["XDG_CONFIG_HOME"] = str(tmp_path)
    return env


@pytest.fixture()
async def app_state(settings: Settings, clock) -> AsyncGenerator[AppState, None]:
    """Full AppState wired the same way the server lifespan wires it."""
    async with httpx.AsyncClient(follow_redirects=True) as client:
        cache = MetadataCache(
            max_entries=settings.cache.max_entries,
            duration_seconds=settings.cache.duration_seconds,
            clock=clock,
        )
        fetcher = Fetcher(client, settings.fetcher)
        yield AppState(
            settings=settings,
            http_client=client,
            cache=cache,
            fetcher=fetcher,
            service=MetadataService(fetcher, cache, settings),
        )
