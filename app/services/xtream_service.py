"""Xtream service — answers panel queries against the active catalog snapshot."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Optional
from urllib.parse import quote, urlparse

from app.models.m3u import StreamKind
from app.models.xtream import AuthErrorResponse, LoginResponse, ServerInfo, UserInfo
from app.services.manifest_service import is_manifest_url

if TYPE_CHECKING:
    from app.models.catalog import Catalog, Channel, Episode, Vod
    from app.services.catalog_service import CatalogService
    from app.services.config_service import ConfigService

logger = logging.getLogger(__name__)

ACCOUNT_LIFETIME = timedelta(days=365)
ACCOUNT_AGE = timedelta(days=180)


# ------------------------------------------------------------------
# Proxy URLs
# ------------------------------------------------------------------

def _creds_path(username: str, password: str) -> str:
    return f"{quote(username, safe='')}/{quote(password, safe='')}"


def live_extension(channel: "Channel", default: str = "ts") -> str:
    return "m3u8" if is_manifest_url(channel.origin_url) else default


def live_url(base: str, username: str, password: str, channel: "Channel", ext: Optional[str] = None) -> str:
    ext = ext or live_extension(channel)
    return f"{base}/{_creds_path(username, password)}/{channel.stream_id}.{ext}"


def vod_url(base: str, username: str, password: str, vod: "Vod") -> str:
    return f"{base}/movie/{_creds_path(username, password)}/{vod.stream_id}.{vod.container_extension}"


def episode_url(base: str, username: str, password: str, episode: "Episode") -> str:
    return f"{base}/series/{_creds_path(username, password)}/{episode.id}.{episode.container_extension}"


class XtreamService:
    """Builds Xtream Codes JSON payloads.

    Every public call reads ``catalog_service.catalog`` once, so a reload
    in the middle of a request cannot mix two snapshots.  Origin URLs are
    never emitted; ``direct_source`` always carries a proxy URL.
    """

    def __init__(
        self,
        config_service: "ConfigService",
        catalog_service: "CatalogService",
        clock: Optional[Callable[[], float]] = None,
    ):
        self.config_service = config_service
        self.catalog_service = catalog_service
        self.clock = clock or time.time

    @property
    def catalog(self) -> "Catalog":
        return self.catalog_service.catalog

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def validate_credentials(self, username: Optional[str], password: Optional[str]) -> bool:
        expected_user, expected_pass = self.config_service.credentials
        if not username or not password:
            return False
        return username == expected_user and password == expected_pass

    def login(self, username: str, password: str, base_url: str) -> dict:
        now = datetime.fromtimestamp(int(self.clock()), tz=timezone.utc)
        parsed = urlparse(base_url)
        protocol = parsed.scheme or "http"
        port = parsed.port or (443 if protocol == "https" else 80)
        response = LoginResponse(
            user_info=UserInfo(
                username=username,
                password=password,
                exp_date=str(int((now + ACCOUNT_LIFETIME).timestamp())),
                created_at=str(int((now - ACCOUNT_AGE).timestamp())),
            ),
            server_info=ServerInfo(
                url=parsed.hostname or "localhost",
                port=str(port),
                server_protocol=protocol,
                timezone=self.config_service.settings.timezone,
                timestamp_now=int(now.timestamp()),
                time_now=now.strftime("%Y-%m-%d %H:%M:%S"),
            ),
        )
        return response.model_dump()

    @staticmethod
    def auth_error() -> dict:
        return AuthErrorResponse().model_dump()

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def categories(self, kind: StreamKind) -> list[dict]:
        catalog = self.catalog
        rows = {
            StreamKind.LIVE: catalog.live_categories,
            StreamKind.MOVIE: catalog.vod_categories,
            StreamKind.SERIES: catalog.series_categories,
        }[kind]
        return [c.model_dump() for c in rows]

    def items(
        self,
        kind: StreamKind,
        username: str,
        password: str,
        base_url: str,
        category_id: Optional[str] = None,
    ) -> list[dict]:
        catalog = self.catalog
        if kind == StreamKind.LIVE:
            rows = [
                {**c.model_dump(by_alias=True), "direct_source": live_url(base_url, username, password, c)}
                for c in catalog.channels
                if not category_id or c.category_id == category_id
            ]
        elif kind == StreamKind.MOVIE:
            rows = [
                {**v.model_dump(by_alias=True), "direct_source": vod_url(base_url, username, password, v)}
                for v in catalog.vods
                if not category_id or v.category_id == category_id
            ]
        else:
            rows = [
                s.model_dump(by_alias=True)
                for s in catalog.series
                if not category_id or s.category_id == category_id
            ]
        return rows

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    def vod_info(self, vod_id: int, username: str, password: str, base_url: str) -> Optional[dict]:
        catalog = self.catalog
        vod = catalog.vod(vod_id)
        info = catalog.vod_info(vod_id)
        if vod is None or info is None:
            return None
        payload = info.model_dump(by_alias=True)
        payload["movie_data"]["direct_source"] = vod_url(base_url, username, password, vod)
        return payload

    def series_info(self, series_id: int, username: str, password: str, base_url: str) -> Optional[dict]:
        info = self.catalog.series_info(series_id)
        if info is None:
            return None
        return {
            "seasons": [s.model_dump() for s in info.seasons],
            "info": info.info.model_dump(by_alias=True),
            "episodes": {
                season: [
                    {**e.model_dump(by_alias=True), "direct_source": episode_url(base_url, username, password, e)}
                    for e in episodes
                ]
                for season, episodes in info.episodes.items()
            },
        }
