"""Catalog builder — classifies parsed playlist entries into panel entities."""
from __future__ import annotations

import logging
import time
from typing import Optional
from urllib.parse import urlparse

from app.models.catalog import (
    Catalog,
    Category,
    Channel,
    Episode,
    EpisodeInfo,
    MovieData,
    SeasonInfo,
    Series,
    SeriesDetails,
    SeriesInfo,
    Vod,
    VodDetails,
    VodInfo,
)
from app.models.m3u import ParsedEntry, ParsedPlaylist, StreamKind
from app.models.xtream import (
    CONTAINER_EXTENSIONS,
    DEFAULT_CONTAINER,
    LIVE_CATEGORY_BASE,
    SERIES_CATEGORY_BASE,
    UNCATEGORIZED,
    VOD_CATEGORY_BASE,
)

logger = logging.getLogger(__name__)


def container_extension(url: str) -> str:
    """Container extension from the URL path suffix, ``mp4`` if unknown."""
    path = urlparse(url).path
    filename = path.rsplit("/", 1)[-1]
    if "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
        if ext in CONTAINER_EXTENSIONS:
            return ext
    return DEFAULT_CONTAINER


def origin_headers(entry: ParsedEntry) -> dict[str, str]:
    headers = {}
    if entry.http_user_agent:
        headers["User-Agent"] = entry.http_user_agent
    if entry.http_referrer:
        headers["Referer"] = entry.http_referrer
    return headers


class CategoryAllocator:
    """Hands out ids within one category band, first-seen name wins."""

    def __init__(self, base: int):
        self.base = base
        self._ids: dict[str, str] = {}

    def resolve(self, name: Optional[str]) -> str:
        name = name or UNCATEGORIZED
        if name not in self._ids:
            self._ids[name] = str(self.base + len(self._ids))
        return self._ids[name]

    def categories(self) -> list[Category]:
        return [
            Category(category_id=cid, category_name=name)
            for name, cid in sorted(self._ids.items())
        ]


# ----------------------------------------------------------------------
# Per-kind builders
# ----------------------------------------------------------------------

def _build_channel(entry: ParsedEntry, category_id: str, added: str) -> Channel:
    return Channel(
        num=entry.stream_number,
        name=entry.name,
        stream_id=entry.stream_number,
        stream_icon=entry.tvg_logo or "",
        epg_channel_id=entry.tvg_id,
        added=added,
        category_id=category_id,
        origin_url=entry.url,
        origin_headers=origin_headers(entry),
    )


def _build_vod(entry: ParsedEntry, category_id: str, genre: str, added: str) -> tuple[Vod, VodInfo]:
    ext = container_extension(entry.url)
    vod = Vod(
        num=entry.stream_number,
        name=entry.name,
        stream_id=entry.stream_number,
        stream_icon=entry.tvg_logo or "",
        added=added,
        category_id=category_id,
        container_extension=ext,
        origin_url=entry.url,
        origin_headers=origin_headers(entry),
    )
    info = VodInfo(
        info=VodDetails(movie_image=vod.stream_icon, genre=genre, rating=vod.rating),
        movie_data=MovieData(
            stream_id=vod.stream_id,
            name=vod.name,
            added=added,
            category_id=category_id,
            container_extension=ext,
        ),
    )
    return vod, info


def _build_series(entry: ParsedEntry, category_id: str, genre: str, added: str) -> tuple[Series, SeriesInfo]:
    cover = entry.tvg_logo or ""
    details = SeriesDetails(
        name=entry.name,
        cover=cover,
        genre=genre,
        last_modified=added,
        category_id=category_id,
    )
    series = Series(num=entry.stream_number, series_id=entry.stream_number, **details.model_dump())
    # A playlist line is a single media file: wrap it as season 1, episode 1
    episode = Episode(
        id=str(entry.stream_number),
        episode_num=1,
        title=entry.name,
        container_extension=container_extension(entry.url),
        info=EpisodeInfo(movie_image=cover),
        added=added,
        season=1,
        origin_url=entry.url,
        origin_headers=origin_headers(entry),
    )
    info = SeriesInfo(
        seasons=[SeasonInfo(season_number=1, name="Season 1", episode_count=1, cover=cover, cover_big=cover)],
        info=details,
        episodes={"1": [episode]},
    )
    return series, info


def build_catalog(playlist: ParsedPlaylist, source: str = "playlist", now: Optional[float] = None) -> Catalog:
    """Turn a parsed playlist into an immutable :class:`Catalog`.

    Pure transformation: category ids depend only on entry order, so two
    builds of the same playlist yield identical ids.
    """
    added = str(int(now if now is not None else time.time()))
    live = CategoryAllocator(LIVE_CATEGORY_BASE)
    movies = CategoryAllocator(VOD_CATEGORY_BASE)
    shows = CategoryAllocator(SERIES_CATEGORY_BASE)

    channels: list[Channel] = []
    vods: list[Vod] = []
    series: list[Series] = []
    vod_infos: dict[int, VodInfo] = {}
    series_infos: dict[int, SeriesInfo] = {}

    for entry in playlist.entries:
        if entry.kind == StreamKind.MOVIE:
            cid = movies.resolve(entry.group_title)
            vod, info = _build_vod(entry, cid, entry.group_title or UNCATEGORIZED, added)
            vods.append(vod)
            vod_infos[vod.stream_id] = info
        elif entry.kind == StreamKind.SERIES:
            cid = shows.resolve(entry.group_title)
            item, info = _build_series(entry, cid, entry.group_title or UNCATEGORIZED, added)
            series.append(item)
            series_infos[item.series_id] = info
        else:
            channels.append(_build_channel(entry, live.resolve(entry.group_title), added))

    catalog = Catalog(
        source=source,
        live_categories=live.categories(),
        vod_categories=movies.categories(),
        series_categories=shows.categories(),
        channels=channels,
        vods=vods,
        series=series,
        vod_infos=vod_infos,
        series_infos=series_infos,
    )
    logger.info(
        f"Built catalog from {source}: {len(channels)} channels, "
        f"{len(vods)} VODs, {len(series)} series"
    )
    return catalog
