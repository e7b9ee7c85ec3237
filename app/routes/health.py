"""Health and status routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_catalog_service
from app.services.catalog_service import CatalogService

router = APIRouter(tags=["health"])

APP_NAME = "M3U Xtream Panel"
APP_VERSION = "1.0.0"

ENDPOINTS = {
    "player_api": "/player_api.php?username=&password=&action=",
    "playlist": "/get.php?username=&password=&type=m3u_plus&output=ts",
    "xmltv": "/xmltv.php?username=&password=",
    "live": "/{username}/{password}/{stream_id}.{ext}",
    "movie": "/movie/{username}/{password}/{vod_id}.{ext}",
    "series": "/series/{username}/{password}/{episode_id}.{ext}",
}


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/")
async def status(catalog_service: CatalogService = Depends(get_catalog_service)):
    catalog = catalog_service.catalog
    return {
        "status": "running",
        "service": APP_NAME,
        "version": APP_VERSION,
        "playlist_loaded": not catalog_service.is_mock,
        "catalog": catalog.stats(),
        "endpoints": ENDPOINTS,
    }
