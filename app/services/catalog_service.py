"""Catalog service — owns the active catalog snapshot and rebuilds it on demand."""
from __future__ import annotations

import logging
import os
import threading
from typing import TYPE_CHECKING

from app.models.catalog import Catalog
from app.services.catalog_builder import build_catalog
from app.services.m3u_parser import PlaylistFormatError, parse_playlist_file
from app.services.mock_catalog import build_mock_catalog

if TYPE_CHECKING:
    from app.services.config_service import ConfigService

logger = logging.getLogger(__name__)


class CatalogService:
    """Holds the current immutable :class:`Catalog`.

    Readers grab ``service.catalog`` once per request and work against that
    snapshot.  ``reload()`` builds a complete new snapshot before swapping
    the single reference, so a reader never sees a half-built catalog.
    """

    def __init__(self, config_service: ConfigService, mock_seed: int | None = None):
        self.config_service = config_service
        self.mock_seed = mock_seed
        self._catalog: Catalog | None = None
        self._reload_lock = threading.Lock()

    @property
    def catalog(self) -> Catalog:
        if self._catalog is None:
            self.load()
        return self._catalog

    # ------------------------------------------------------------------
    # Load / Reload
    # ------------------------------------------------------------------

    def _build(self) -> Catalog:
        path = self.config_service.playlist_path
        cfg = self.config_service.settings
        try:
            playlist = parse_playlist_file(path)
        except FileNotFoundError:
            if not cfg.mock_fallback:
                raise
            logger.warning(f"Playlist not found at {path}, serving mock catalog")
        except (PlaylistFormatError, OSError) as e:
            if not cfg.mock_fallback:
                raise
            logger.error(f"Failed to load playlist {path}: {e}; serving mock catalog")
        else:
            logger.info(f"Parsed {len(playlist.entries)} entries from {os.path.basename(path)}")
            return build_catalog(playlist, source=path)
        return build_mock_catalog(asset_base=cfg.server_url, seed=self.mock_seed)

    def load(self) -> Catalog:
        """Build a snapshot from the configured source and publish it."""
        with self._reload_lock:
            catalog = self._build()
            self._catalog = catalog
        return catalog

    def reload(self) -> Catalog:
        """Alias for ``load()``."""
        return self.load()

    @property
    def is_mock(self) -> bool:
        return self.catalog.source == "mock"
