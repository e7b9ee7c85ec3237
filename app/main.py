"""M3U Xtream Panel — serves an M3U playlist through an Xtream Codes compatible API."""
from __future__ import annotations

import logging
import os
import random
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from app.routes import catalog_api, epg, health, player_api, playlist, stream_proxy
from app.routes.health import APP_NAME, APP_VERSION
from app.services.catalog_service import CatalogService
from app.services.config_service import ConfigService
from app.services.epg_service import EpgService
from app.services.http_client import HttpClientService
from app.services.m3u_service import M3uService
from app.services.stream_service import StreamProxyService
from app.services.xtream_service import XtreamService

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
logger = logging.getLogger(__name__)

# Data directory - use environment variable or default to /data (Docker) or ./data (local)
DATA_DIR = os.environ.get("DATA_DIR", "/data" if os.path.exists("/data") else "./data")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown"""
    catalog = app.state.catalog_service.catalog
    logger.info(f"{APP_NAME} {APP_VERSION} serving {catalog.source}: {catalog.stats()}")

    yield

    await app.state.http_client.close()
    logger.info("Application shutdown complete")


def create_app(
    data_dir: Optional[str] = None,
    config_overrides: Optional[dict] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    mock_seed: Optional[int] = None,
    epg_seed: Optional[int] = None,
) -> FastAPI:
    """Build a fully-wired app.

    The catalog is built here, before the server accepts any request.
    *transport* replaces the network for the upstream client (tests).
    """
    cfg = ConfigService(data_dir or DATA_DIR, overrides=config_overrides)
    cfg.load()

    http = HttpClientService(timeout=cfg.upstream_timeout, limits=cfg.upstream_limits, transport=transport)
    catalog_svc = CatalogService(cfg, mock_seed=mock_seed)
    catalog_svc.load()
    epg_svc = EpgService(cfg, rng=random.Random(epg_seed) if epg_seed is not None else None)
    xtream = XtreamService(cfg, catalog_svc)
    m3u = M3uService(xtream)
    proxy = StreamProxyService(cfg, http)

    app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

    # Attach state for DI
    app.state.config_service = cfg
    app.state.http_client = http
    app.state.catalog_service = catalog_svc
    app.state.epg_service = epg_svc
    app.state.xtream_service = xtream
    app.state.m3u_service = m3u
    app.state.stream_proxy = proxy

    # stream_proxy last: its bare /{username}/{password}/{stream_id} route matches any three segments
    for r in (health, catalog_api, player_api, playlist, epg, stream_proxy):
        app.include_router(r.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
