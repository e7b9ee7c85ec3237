"""Catalog management API routes."""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_catalog_service, get_config_service
from app.services.catalog_service import CatalogService
from app.services.config_service import ConfigService
from app.services.m3u_parser import PlaylistFormatError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/api/catalog/status")
async def catalog_status(catalog_service: CatalogService = Depends(get_catalog_service)):
    return {"mock": catalog_service.is_mock, **catalog_service.catalog.stats()}


@router.post("/api/catalog/reload")
async def reload_catalog(
    cfg: ConfigService = Depends(get_config_service),
    catalog_service: CatalogService = Depends(get_catalog_service),
):
    cfg.reload()
    try:
        catalog = await asyncio.to_thread(catalog_service.reload)
    except (PlaylistFormatError, OSError) as e:
        logger.error(f"Catalog reload failed, keeping previous snapshot: {e}")
        return JSONResponse({"status": "error", "error": str(e)}, status_code=500)
    return {"status": "reloaded", **catalog.stats()}
