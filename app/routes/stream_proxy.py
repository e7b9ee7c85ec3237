"""Stream proxy routes — live / movie / series media endpoints."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from app.dependencies import get_stream_proxy, get_xtream_service
from app.models.catalog import Sourced
from app.services.manifest_service import is_manifest_url
from app.services.stream_service import StreamProxyService
from app.services.xtream_service import XtreamService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stream-proxy"])


def _unauthorized() -> Response:
    return JSONResponse({"error": "Unauthorized"}, status_code=401)


def _not_found() -> Response:
    return JSONResponse({"error": "Stream not found"}, status_code=404)


def _as_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


async def _proxy_item(
    request: Request,
    proxy: StreamProxyService,
    item: Optional[Sourced],
    ext: Optional[str],
) -> Response:
    if item is None or not item.origin_url:
        return _not_found()
    return await proxy.proxy(request, item.origin_url, ext, item.origin_headers)


# ------------------------------------------------------------------
# Movie / series
# ------------------------------------------------------------------


@router.get("/movie/{username}/{password}/{stream_id}")
@router.get("/movie/{username}/{password}/{stream_id}.{ext}")
async def proxy_movie_stream(
    request: Request, username: str, password: str, stream_id: str, ext: Optional[str] = None,
    xtream: XtreamService = Depends(get_xtream_service),
    proxy: StreamProxyService = Depends(get_stream_proxy),
):
    if not xtream.validate_credentials(username, password):
        return _unauthorized()
    vod_id = _as_int(stream_id)
    vod = xtream.catalog.vod(vod_id) if vod_id is not None else None
    return await _proxy_item(request, proxy, vod, ext or (vod.container_extension if vod else None))


@router.get("/series/{username}/{password}/{episode_id}")
@router.get("/series/{username}/{password}/{episode_id}.{ext}")
async def proxy_series_stream(
    request: Request, username: str, password: str, episode_id: str, ext: Optional[str] = None,
    xtream: XtreamService = Depends(get_xtream_service),
    proxy: StreamProxyService = Depends(get_stream_proxy),
):
    if not xtream.validate_credentials(username, password):
        return _unauthorized()
    episode = xtream.catalog.episode(episode_id)
    return await _proxy_item(request, proxy, episode, ext or (episode.container_extension if episode else None))


# ------------------------------------------------------------------
# Live (registered last: the bare pattern matches any three segments)
# ------------------------------------------------------------------


@router.get("/live/{username}/{password}/{stream_id}")
@router.get("/live/{username}/{password}/{stream_id}.{ext}")
@router.get("/{username}/{password}/{stream_id}")
@router.get("/{username}/{password}/{stream_id}.{ext}")
async def proxy_live_stream(
    request: Request, username: str, password: str, stream_id: str, ext: Optional[str] = None,
    xtream: XtreamService = Depends(get_xtream_service),
    proxy: StreamProxyService = Depends(get_stream_proxy),
):
    if not xtream.validate_credentials(username, password):
        return _unauthorized()
    channel_id = _as_int(stream_id)
    channel = xtream.catalog.channel(channel_id) if channel_id is not None else None
    if channel is not None and ext and is_manifest_url(channel.origin_url):
        ext = "m3u8"
    return await _proxy_item(request, proxy, channel, ext)
