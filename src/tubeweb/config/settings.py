"""Application settings loaded from environment variables and config files."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

from tubeweb.config import CONFIG_ROOT


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/117.0.0.0 Safari/537.36"
)


class ContinuationPolicy(str, Enum):
    """How to choose between several continuation tokens found in one response."""

    LONGEST = "longest"
    FIRST = "first"


class SectionPolicy(str, Enum):
    """How to choose between several item-section containers in one response."""

    MOST_ITEMS = "most_items"
    FIRST = "first"


class ClientContext(BaseModel):
    """Innertube client identity merged into request bodies."""

    client_name: str = Field(alias="clientName", min_length=1)
    client_version: str = Field(alias="clientVersion", min_length=1)
    android_sdk_version: Optional[PositiveInt] = Field(default=None, alias="androidSdkVersion")

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    def as_payload(self) -> Dict[str, Any]:
        """Return the ``{"context": {"client": ...}}`` fragment for this client."""

        client = self.model_dump(by_alias=True, exclude_none=True)
        return {"context": {"client": client}}


class ClientContexts(BaseModel):
    """The three client identities used against the upstream API."""

    web: ClientContext = ClientContext(clientName="WEB", clientVersion="2.20230928.04.00")
    web_remix: ClientContext = ClientContext(clientName="WEB_REMIX", clientVersion="1.20220815.01.00")
    android: ClientContext = ClientContext(clientName="ANDROID", clientVersion="18.11.34", androidSdkVersion=30)

    model_config = ConfigDict(extra="forbid")


def _load_client_contexts(clients_path: Path) -> ClientContexts:
    if not clients_path.exists():
        return ClientContexts()

    raw_data = yaml.safe_load(clients_path.read_text(encoding="utf-8")) or {}

    clients: Dict[str, ClientContext] = {}
    for client_key, config in raw_data.get("clients", {}).items():
        clients[client_key] = ClientContext(**config)
    return ClientContexts(**clients)


class Settings(BaseSettings):
    """Primary settings for the tubeweb client and CLI."""

    youtube_url: str = Field(default="https://www.youtube.com", alias="TUBEWEB_YOUTUBE_URL")
    youtube_music_url: str = Field(default="https://music.youtube.com", alias="TUBEWEB_YOUTUBE_MUSIC_URL")
    api_base_path: str = Field(default="/youtubei/v1/", alias="TUBEWEB_API_BASE_PATH")
    api_parameters: str = Field(default="?prettyPrint=false", alias="TUBEWEB_API_PARAMETERS")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="TUBEWEB_USER_AGENT")
    request_timeout_seconds: PositiveFloat = Field(default=30.0, alias="TUBEWEB_REQUEST_TIMEOUT")
    music_channel_browse_id: str = Field(default="UC-9-kyTW8ZkZNDHQJ6FgpwQ", alias="TUBEWEB_MUSIC_CHANNEL_ID")

    continuation_policy: ContinuationPolicy = Field(
        default=ContinuationPolicy.LONGEST, alias="TUBEWEB_CONTINUATION_POLICY"
    )
    section_policy: SectionPolicy = Field(default=SectionPolicy.MOST_ITEMS, alias="TUBEWEB_SECTION_POLICY")

    verbose: bool = Field(default=False, alias="TUBEWEB_VERBOSE")

    clients: ClientContexts = Field(default_factory=lambda: _load_client_contexts(CONFIG_ROOT / "clients.yaml"))

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True)

    @property
    def youtube_domain(self) -> str:
        """Host name of the main site, used to pick the client context for a URL."""

        return self.youtube_url.split("://", 1)[-1].rstrip("/")

    def endpoint_url(self, endpoint: str, *, music: bool = False) -> str:
        """Build a full API URL for ``endpoint`` on the main or music site."""

        root = self.youtube_music_url if music else self.youtube_url
        return f"{root.rstrip('/')}{self.api_base_path}{endpoint}{self.api_parameters}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""

    return Settings()


__all__ = [
    "ClientContext",
    "ClientContexts",
    "ContinuationPolicy",
    "SectionPolicy",
    "Settings",
    "get_settings",
]
