"""Xtream Codes panel constants, actions and authentication payloads."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Category id bands per content kind
LIVE_CATEGORY_BASE = 1
VOD_CATEGORY_BASE = 1000
SERIES_CATEGORY_BASE = 2000

UNCATEGORIZED = "Uncategorized"

# Container extensions recognised from an origin URL suffix
CONTAINER_EXTENSIONS = ("mp4", "mkv", "avi", "m3u8", "ts")
DEFAULT_CONTAINER = "mp4"

# Outbound content type by requested extension
CONTENT_TYPES = {
    "ts": "video/mp2t",
    "m3u8": "application/vnd.apple.mpegurl",
    "mp4": "video/mp4",
    "mkv": "video/x-matroska",
    "avi": "video/x-msvideo",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"

ALLOWED_OUTPUT_FORMATS = ["m3u8", "ts", "rtmp"]


class PlayerAction(str, Enum):
    """Actions understood by ``player_api.php``."""

    LOGIN = ""
    GET_LIVE_CATEGORIES = "get_live_categories"
    GET_VOD_CATEGORIES = "get_vod_categories"
    GET_SERIES_CATEGORIES = "get_series_categories"
    GET_LIVE_STREAMS = "get_live_streams"
    GET_VOD_STREAMS = "get_vod_streams"
    GET_SERIES = "get_series"
    GET_VOD_INFO = "get_vod_info"
    GET_SERIES_INFO = "get_series_info"
    GET_SHORT_EPG = "get_short_epg"
    GET_SIMPLE_DATA_TABLE = "get_simple_data_table"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> "PlayerAction":
        if not value or not value.strip():
            return cls.LOGIN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


# ----------------------------------------------------------------------
# Authentication payloads
# ----------------------------------------------------------------------

class UserInfo(BaseModel):
    username: str
    password: str
    message: str = "Welcome!"
    auth: int = 1
    status: str = "Active"
    exp_date: str
    is_trial: str = "0"
    active_cons: str = "0"
    created_at: str
    max_connections: str = "0"
    allowed_output_formats: list[str] = Field(default_factory=lambda: list(ALLOWED_OUTPUT_FORMATS))


class ServerInfo(BaseModel):
    url: str
    port: str = "80"
    https_port: str = "443"
    server_protocol: str = "http"
    rtmp_port: str = "8880"
    timezone: str = "UTC"
    timestamp_now: int
    time_now: str


class LoginResponse(BaseModel):
    user_info: UserInfo
    server_info: ServerInfo


class AuthErrorUserInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    auth: int = 0
    status: str = "Disabled"
    message: str = "Invalid credentials"


class AuthErrorResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_info: AuthErrorUserInfo = Field(default_factory=AuthErrorUserInfo)


class EpgEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    epg_id: str
    title: str
    lang: str = "en"
    start: str
    end: str
    description: str = ""
    channel_id: str
    start_timestamp: int
    stop_timestamp: int
    now_playing: int = 0
    has_archive: int = 0
