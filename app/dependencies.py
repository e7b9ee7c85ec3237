"""FastAPI dependency injection — provides services via Depends()."""
from __future__ import annotations

from fastapi import Depends, Request

from app.services.catalog_service import CatalogService
from app.services.config_service import ConfigService
from app.services.epg_service import EpgService
from app.services.m3u_service import M3uService
from app.services.stream_service import StreamProxyService
from app.services.xtream_service import XtreamService


def get_config_service(request: Request) -> ConfigService:
    return request.app.state.config_service


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_epg_service(request: Request) -> EpgService:
    return request.app.state.epg_service


def get_xtream_service(request: Request) -> XtreamService:
    return request.app.state.xtream_service


def get_m3u_service(request: Request) -> M3uService:
    return request.app.state.m3u_service


def get_stream_proxy(request: Request) -> StreamProxyService:
    return request.app.state.stream_proxy


def get_base_url(request: Request, cfg: ConfigService = Depends(get_config_service)) -> str:
    """Externally visible base URL: configured ``server_url`` or the request's own."""
    return cfg.server_url or str(request.base_url).rstrip("/")
