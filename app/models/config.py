"""Pydantic models for application configuration."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """The single username/password pair accepted by the panel."""
    model_config = ConfigDict(extra="allow")

    username: str = "demo"
    password: str = "demo123"


class ProxyOptions(BaseModel):
    """Upstream fetch settings for the stream proxy."""
    model_config = ConfigDict(extra="allow")

    connect_timeout: float = 30.0
    # Ceiling for a single upstream read; long transfers must fit under it.
    read_timeout: float = 300.0
    write_timeout: float = 30.0
    pool_timeout: float = 30.0
    max_connections: int = 100
    max_keepalive_connections: int = 20
    chunk_size: int = 64 * 1024
    disconnect_poll_interval: float = 0.5


class EpgOptions(BaseModel):
    """Horizons (in hours) of the synthesized programme guide."""
    model_config = ConfigDict(extra="allow")

    short_hours: int = 6
    short_limit: int = 4
    full_hours: int = 24
    xmltv_hours: int = 48
    lang: str = "en"


class AppConfig(BaseModel):
    """Root application configuration."""
    model_config = ConfigDict(extra="allow")

    playlist_path: str = "playlist.m3u"
    server_url: str = ""
    timezone: str = "UTC"
    mock_fallback: bool = True
    credentials: Credentials = Field(default_factory=Credentials)
    proxy: ProxyOptions = Field(default_factory=ProxyOptions)
    epg: EpgOptions = Field(default_factory=EpgOptions)
