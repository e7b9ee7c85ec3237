"""M3U generation service — exports the catalog as a playlist of proxy URLs."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from app.models.xtream import UNCATEGORIZED
from app.services.xtream_service import episode_url, live_extension, live_url, vod_url

if TYPE_CHECKING:
    from app.models.catalog import Category
    from app.services.xtream_service import XtreamService

# ``output`` hint -> live extension for non-manifest origins
OUTPUT_EXTENSIONS = {"ts": "ts", "mpegts": "ts", "m3u8": "m3u8", "hls": "m3u8"}


def _attr(value: Optional[str]) -> str:
    return (value or "").replace('"', "'")


def _category_map(categories: tuple["Category", ...]) -> dict[str, str]:
    return {c.category_id: c.category_name for c in categories}


class M3uService:
    """Generates M3U playlists for the active catalog."""

    def __init__(self, xtream_service: "XtreamService"):
        self.xtream_service = xtream_service

    def generate_m3u(
        self,
        username: str,
        password: str,
        base_url: str,
        playlist_type: Optional[str] = None,
        output: Optional[str] = None,
    ) -> str:
        """Render live channels, VODs and episodes.

        Entries are ordered by stream id, which for a playlist-backed
        catalog is the order of the source playlist.  ``type=m3u`` drops
        the ``tvg-*`` / ``group-title`` attributes.
        """
        catalog = self.xtream_service.catalog
        plus = (playlist_type or "m3u_plus").lower() != "m3u"
        live_ext = OUTPUT_EXTENSIONS.get((output or "").lower(), "ts")

        live_groups = _category_map(catalog.live_categories)
        vod_groups = _category_map(catalog.vod_categories)
        series_groups = _category_map(catalog.series_categories)

        # (order, tvg-id, name, logo, group, url)
        rows: list[tuple[int, str, str, str, str, str]] = []
        for c in catalog.channels:
            url = live_url(base_url, username, password, c, live_extension(c, live_ext))
            group = live_groups.get(c.category_id, UNCATEGORIZED)
            rows.append((c.stream_id, c.epg_channel_id or "", c.name, c.stream_icon, group, url))
        for v in catalog.vods:
            url = vod_url(base_url, username, password, v)
            group = vod_groups.get(v.category_id, UNCATEGORIZED)
            rows.append((v.stream_id, "", v.name, v.stream_icon, group, url))
        for series, episode in catalog.episodes():
            if episode.title == series.name:
                name = series.name
            else:
                name = f"{series.name} S{episode.season:02d}E{episode.episode_num:02d}"
            url = episode_url(base_url, username, password, episode)
            group = series_groups.get(series.category_id, UNCATEGORIZED)
            rows.append((series.series_id, "", name, series.cover, group, url))
        rows.sort(key=lambda row: row[0])

        lines = ["#EXTM3U"]
        for _, tvg_id, name, logo, group, url in rows:
            if plus:
                lines.append(
                    f'#EXTINF:-1 tvg-id="{_attr(tvg_id)}" tvg-name="{_attr(name)}" '
                    f'tvg-logo="{_attr(logo)}" group-title="{_attr(group)}",{name}'
                )
            else:
                lines.append(f"#EXTINF:-1,{name}")
            lines.append(url)

        stats_line = (
            f"# Content: {len(catalog.channels)} live, {len(catalog.vods)} movies, "
            f"{len(catalog.series)} series"
        )
        lines.insert(1, stats_line)
        return "\n".join(lines) + "\n"
