"""Xtream Codes ``player_api.php`` — login, categories, listings, details and EPG."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Request

from app.dependencies import get_base_url, get_epg_service, get_xtream_service
from app.models.m3u import StreamKind
from app.models.xtream import PlayerAction
from app.services.epg_service import EpgService
from app.services.xtream_service import XtreamService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["xtream"])


@dataclass(frozen=True)
class PlayerCall:
    """One authenticated ``player_api.php`` request."""

    xtream: XtreamService
    epg: EpgService
    username: str
    password: str
    base_url: str
    params: dict[str, str]

    def param(self, name: str) -> Optional[str]:
        value = self.params.get(name)
        return value.strip() if value and value.strip() else None

    def int_param(self, name: str) -> Optional[int]:
        value = self.param(name)
        try:
            return int(value) if value is not None else None
        except ValueError:
            return None


def _error(message: str) -> dict:
    return {"error": message}


# ------------------------------------------------------------------
# Handlers
# ------------------------------------------------------------------


def _login(call: PlayerCall) -> Any:
    return call.xtream.login(call.username, call.password, call.base_url)


def _categories(kind: StreamKind) -> Callable[[PlayerCall], Any]:
    def handler(call: PlayerCall) -> Any:
        return call.xtream.categories(kind)
    return handler


def _streams(kind: StreamKind) -> Callable[[PlayerCall], Any]:
    def handler(call: PlayerCall) -> Any:
        return call.xtream.items(kind, call.username, call.password, call.base_url, call.param("category_id"))
    return handler


def _vod_info(call: PlayerCall) -> Any:
    vod_id = call.int_param("vod_id")
    if vod_id is None:
        return _error("Invalid vod_id")
    info = call.xtream.vod_info(vod_id, call.username, call.password, call.base_url)
    return info if info is not None else _error("VOD not found")


def _series_info(call: PlayerCall) -> Any:
    series_id = call.int_param("series_id")
    if series_id is None:
        return _error("Invalid series_id")
    info = call.xtream.series_info(series_id, call.username, call.password, call.base_url)
    return info if info is not None else _error("Series not found")


def _short_epg(call: PlayerCall) -> Any:
    stream_id = call.int_param("stream_id")
    if stream_id is None:
        return _error("Invalid stream_id")
    return call.epg.short_epg(call.xtream.catalog, stream_id, call.int_param("limit"))


def _full_epg(call: PlayerCall) -> Any:
    stream_id = call.int_param("stream_id")
    if stream_id is None:
        return _error("Invalid stream_id")
    return call.epg.full_epg(call.xtream.catalog, stream_id)


def _unsupported(call: PlayerCall) -> Any:
    logger.info(f"Unsupported player_api action: {call.param('action')}")
    return _error("Action not supported")


ACTION_HANDLERS: dict[PlayerAction, Callable[[PlayerCall], Any]] = {
    PlayerAction.LOGIN: _login,
    PlayerAction.GET_LIVE_CATEGORIES: _categories(StreamKind.LIVE),
    PlayerAction.GET_VOD_CATEGORIES: _categories(StreamKind.MOVIE),
    PlayerAction.GET_SERIES_CATEGORIES: _categories(StreamKind.SERIES),
    PlayerAction.GET_LIVE_STREAMS: _streams(StreamKind.LIVE),
    PlayerAction.GET_VOD_STREAMS: _streams(StreamKind.MOVIE),
    PlayerAction.GET_SERIES: _streams(StreamKind.SERIES),
    PlayerAction.GET_VOD_INFO: _vod_info,
    PlayerAction.GET_SERIES_INFO: _series_info,
    PlayerAction.GET_SHORT_EPG: _short_epg,
    PlayerAction.GET_SIMPLE_DATA_TABLE: _full_epg,
    PlayerAction.UNKNOWN: _unsupported,
}


@router.get("/player_api.php")
async def player_api(
    request: Request,
    xtream: XtreamService = Depends(get_xtream_service),
    epg: EpgService = Depends(get_epg_service),
    base_url: str = Depends(get_base_url),
):
    params = dict(request.query_params)
    username = params.get("username", "")
    password = params.get("password", "")

    # Bad credentials are reported in-band with HTTP 200, as panels do
    if not xtream.validate_credentials(username, password):
        return xtream.auth_error()

    call = PlayerCall(xtream, epg, username, password, base_url, params)
    return ACTION_HANDLERS[PlayerAction.parse(params.get("action"))](call)
