"""Pydantic models for parsed M3U playlists."""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StreamKind(str, Enum):
    LIVE = "live"
    MOVIE = "movie"
    SERIES = "series"


class ParsedEntry(BaseModel):
    """One ``#EXTINF`` entry together with the URL that follows it."""
    model_config = ConfigDict(frozen=True)

    stream_number: int
    url: str
    name: str = ""
    duration: int = -1
    kind: StreamKind = StreamKind.LIVE
    tvg_id: Optional[str] = None
    tvg_name: Optional[str] = None
    tvg_logo: Optional[str] = None
    group_title: Optional[str] = None
    tvg_chno: Optional[str] = None
    http_referrer: Optional[str] = None
    http_user_agent: Optional[str] = None


class ParsedPlaylist(BaseModel):
    """Entries in source order plus header attributes of the playlist."""
    model_config = ConfigDict(frozen=True)

    entries: list[ParsedEntry] = Field(default_factory=list)
    attributes: dict[str, str] = Field(default_factory=dict)

    @property
    def categories(self) -> list[str]:
        """Distinct non-empty group titles, sorted."""
        return sorted({e.group_title for e in self.entries if e.group_title})
