"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (LINKMETA__FETCHER__TIMEOUT_SECONDS=5)
  2. linkmeta.yaml          (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional. With neither file nor env vars, every value
below is the built-in constant the extractor was designed around.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

PLACEHOLDER_THUMBNAIL = "/placeholder.svg"

# Order is a reliability ranking: the gateway stops at the first usable body.
DEFAULT_PROXY_TEMPLATES: list[str] = [
    "https://api.allorigins.win/raw?url={url}",
    "https://corsproxy.io/?{url}",
    "https://api.codetabs.com/v1/proxy?quest={url}",
    "https://cors.sh/{url}",
    "https://thingproxy.freeboard.io/fetch/{url}",
    # Rate limited, so last.
    "https://cors-anywhere.herokuapp.com/{url}",
]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _find_config_file() -> str | None:
    """Return the path of the first linkmeta.yaml found, or None."""
    candidates = [
        Path("linkmeta.yaml"),
        Path(platformdirs.user_config_dir("linkmeta")) / "linkmeta.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080
    auth_enabled: bool = False
    auth_key: str = ""


class CacheSettings(BaseModel):
    duration_seconds: float = Field(default=60 * 60, gt=0)
    max_entries: int = Field(default=100, ge=1)


class FetcherSettings(BaseModel):
    timeout_seconds: float = Field(default=2.5, gt=0)
    proxy_templates: list[str] = Field(default_factory=lambda: list(DEFAULT_PROXY_TEMPLATES))
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
    accept_language: str = "en-US,en;q=0.5"


class ExtractorSettings(BaseModel):
    title_max_length: int = Field(default=100, ge=1)
    description_max_length: int = Field(default=250, ge=1)
    html_scan_limit: int = Field(default=50_000, ge=1)
    placeholder_thumbnail: str = PLACEHOLDER_THUMBNAIL


class PlatformSettings(BaseModel):
    hosts: list[str] = Field(default_factory=lambda: ["twitter.com", "x.com"])
    default_name: str = "Twitter/X"


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: LINKMETA__CACHE__MAX_ENTRIES=500
        env_prefix="LINKMETA__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    cache: CacheSettings = CacheSettings()
    fetcher: FetcherSettings = FetcherSettings()
    extractor: ExtractorSettings = ExtractorSettings()
    platform: PlatformSettings = PlatformSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
            # dotenv and file secrets intentionally excluded
        )
