"""Pydantic models for catalog entities.

Field names are the wire names expected by Xtream Codes clients; keep them
stable.  ``origin_url`` / ``origin_headers`` describe the real upstream
location and are excluded from every serialized form.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Sourced(BaseModel):
    """Base for entities that point at an upstream media URL."""
    model_config = ConfigDict(frozen=True)

    origin_url: str = Field(default="", exclude=True)
    origin_headers: dict[str, str] = Field(default_factory=dict, exclude=True)


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    category_id: str
    category_name: str
    parent_id: int = 0


class Channel(Sourced):
    num: int
    name: str
    stream_type: str = "live"
    stream_id: int
    stream_icon: str = ""
    epg_channel_id: Optional[str] = None
    added: str = ""
    category_id: str = ""
    custom_sid: Optional[str] = None
    tv_archive: int = 0
    direct_source: str = ""
    tv_archive_duration: int = 0


class Vod(Sourced):
    num: int
    name: str
    stream_type: str = "movie"
    stream_id: int
    stream_icon: str = ""
    rating: str = "0"
    rating_5based: float = 0
    added: str = ""
    category_id: str = ""
    container_extension: str = "mp4"
    custom_sid: Optional[str] = None
    direct_source: str = ""


# ----------------------------------------------------------------------
# VOD detail
# ----------------------------------------------------------------------

class VideoInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    codec_name: str = "h264"
    width: int = 1920
    height: int = 1080


class AudioInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    codec_name: str = "aac"
    channels: int = 2
    sample_rate: str = "44100"


class VodDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    movie_image: str = ""
    tmdb_id: Optional[str] = None
    backdrop_path: list[str] = Field(default_factory=list)
    youtube_trailer: Optional[str] = None
    genre: str = ""
    plot: str = ""
    cast: str = ""
    rating: str = "0"
    director: str = ""
    releasedate: str = ""
    duration_secs: int = 0
    duration: str = ""
    bitrate: int = 0
    video: VideoInfo = Field(default_factory=VideoInfo)
    audio: AudioInfo = Field(default_factory=AudioInfo)


class MovieData(BaseModel):
    model_config = ConfigDict(frozen=True)

    stream_id: int
    name: str
    added: str = ""
    category_id: str = ""
    container_extension: str = "mp4"
    custom_sid: Optional[str] = None
    direct_source: str = ""


class VodInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    info: VodDetails
    movie_data: MovieData


# ----------------------------------------------------------------------
# Series
# ----------------------------------------------------------------------

class SeriesDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    cover: str = ""
    plot: str = ""
    cast: str = ""
    director: str = ""
    genre: str = ""
    release_date: str = Field(default="", serialization_alias="releaseDate")
    last_modified: str = ""
    rating: str = "0"
    rating_5based: float = 0
    backdrop_path: list[str] = Field(default_factory=list)
    youtube_trailer: Optional[str] = None
    episode_run_time: str = ""
    category_id: str = ""


class Series(SeriesDetails):
    num: int
    series_id: int


class SeasonInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    season_number: int
    air_date: str = ""
    name: str = ""
    overview: str = ""
    episode_count: int = 0
    cover: str = ""
    cover_big: str = ""


class EpisodeInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    movie_image: str = ""
    plot: str = ""
    releasedate: str = ""
    rating: float = 0
    duration_secs: int = 0
    duration: str = ""
    bitrate: int = 0
    video: VideoInfo = Field(default_factory=VideoInfo)
    audio: AudioInfo = Field(default_factory=AudioInfo)


class Episode(Sourced):
    id: str
    episode_num: int
    title: str
    container_extension: str = "mp4"
    info: EpisodeInfo = Field(default_factory=EpisodeInfo)
    custom_sid: Optional[str] = None
    added: str = ""
    season: int = 1
    direct_source: str = ""


class SeriesInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    seasons: list[SeasonInfo] = Field(default_factory=list)
    info: SeriesDetails
    episodes: dict[str, list[Episode]] = Field(default_factory=dict)


# ----------------------------------------------------------------------
# Snapshot
# ----------------------------------------------------------------------

class Catalog:
    """Immutable, indexed snapshot of everything the panel can serve.

    Built once by the catalog builder or the mock generator and never
    mutated; a reload publishes a new instance instead.
    """

    def __init__(
        self,
        *,
        source: str,
        live_categories: list[Category],
        vod_categories: list[Category],
        series_categories: list[Category],
        channels: list[Channel],
        vods: list[Vod],
        series: list[Series],
        vod_infos: dict[int, VodInfo],
        series_infos: dict[int, SeriesInfo],
    ):
        self.source = source
        self.live_categories = tuple(live_categories)
        self.vod_categories = tuple(vod_categories)
        self.series_categories = tuple(series_categories)
        self.channels = tuple(channels)
        self.vods = tuple(vods)
        self.series = tuple(series)
        self._vod_infos = dict(vod_infos)
        self._series_infos = dict(series_infos)

        self._channels_by_id = {c.stream_id: c for c in self.channels}
        self._vods_by_id = {v.stream_id: v for v in self.vods}
        self._series_by_id = {s.series_id: s for s in self.series}
        self._episodes_by_id: dict[str, Episode] = {}
        for info in self._series_infos.values():
            for episodes in info.episodes.values():
                for episode in episodes:
                    self._episodes_by_id.setdefault(episode.id, episode)

    def channel(self, stream_id: int) -> Channel | None:
        return self._channels_by_id.get(stream_id)

    def vod(self, stream_id: int) -> Vod | None:
        return self._vods_by_id.get(stream_id)

    def series_item(self, series_id: int) -> Series | None:
        return self._series_by_id.get(series_id)

    def vod_info(self, stream_id: int) -> VodInfo | None:
        return self._vod_infos.get(stream_id)

    def series_info(self, series_id: int) -> SeriesInfo | None:
        return self._series_infos.get(series_id)

    def episode(self, episode_id: str) -> Episode | None:
        return self._episodes_by_id.get(episode_id)

    def episodes(self) -> list[tuple[Series, Episode]]:
        """Every episode with its owning series, in series order."""
        result = []
        for item in self.series:
            info = self._series_infos.get(item.series_id)
            if info is None:
                continue
            for season in sorted(info.episodes, key=int):
                for episode in info.episodes[season]:
                    result.append((item, episode))
        return result

    def stats(self) -> dict:
        return {
            "source": self.source,
            "live_categories": len(self.live_categories),
            "vod_categories": len(self.vod_categories),
            "series_categories": len(self.series_categories),
            "channels": len(self.channels),
            "vods": len(self.vods),
            "series": len(self.series),
            "episodes": len(self._episodes_by_id),
        }
