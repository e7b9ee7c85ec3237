"""Configuration service — loads and provides access to AppConfig."""
from __future__ import annotations

import json
import logging
import os

import httpx
from pydantic import ValidationError

from app.models.config import AppConfig

logger = logging.getLogger(__name__)

# Environment variables that override config.json
ENV_OVERRIDES = {
    "PLAYLIST_PATH": "playlist_path",
    "SERVER_URL": "server_url",
}
ENV_CREDENTIALS = {
    "XTREAM_USERNAME": "username",
    "XTREAM_PASSWORD": "password",
}


class ConfigService:
    """Manages application configuration loaded from disk and the environment.

    The config is kept in-memory after first load and re-read on explicit
    ``load()`` or ``reload()`` calls.  Every route that needs the config
    should depend on this service rather than reading the JSON directly.
    """

    def __init__(self, data_dir: str, overrides: dict | None = None):
        self.data_dir = data_dir
        self.config_file = os.path.join(data_dir, "config.json")
        self.overrides = overrides or {}
        self._config = AppConfig()

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def _read_file(self) -> dict:
        if not os.path.exists(self.config_file):
            return {}
        try:
            with open(self.config_file) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading config: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Ignoring {self.config_file}: top level must be an object")
            return {}
        return data

    def load(self) -> AppConfig:
        """Load configuration from disk, then apply env and explicit overrides."""
        data = self._read_file()

        for env, key in ENV_OVERRIDES.items():
            if os.environ.get(env):
                data[key] = os.environ[env]
        for env, key in ENV_CREDENTIALS.items():
            if os.environ.get(env):
                data.setdefault("credentials", {})[key] = os.environ[env]
        data.update(self.overrides)

        try:
            self._config = AppConfig.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid configuration, using defaults: {e}")
            self._config = AppConfig()
        return self._config

    def reload(self) -> AppConfig:
        """Alias for ``load()``."""
        return self.load()

    @property
    def settings(self) -> AppConfig:
        return self._config

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------

    def get_playlist_path(self) -> str:
        path = self._config.playlist_path
        if os.path.isabs(path):
            return path
        return os.path.join(self.data_dir, path)

    playlist_path = property(get_playlist_path)

    def get_credentials(self) -> tuple[str, str]:
        creds = self._config.credentials
        return creds.username, creds.password

    credentials = property(get_credentials)

    def get_server_url(self) -> str:
        return self._config.server_url.rstrip("/")

    server_url = property(get_server_url)

    def get_upstream_timeout(self) -> httpx.Timeout:
        proxy = self._config.proxy
        return httpx.Timeout(
            connect=proxy.connect_timeout,
            read=proxy.read_timeout,
            write=proxy.write_timeout,
            pool=proxy.pool_timeout,
        )

    upstream_timeout = property(get_upstream_timeout)

    def get_upstream_limits(self) -> httpx.Limits:
        proxy = self._config.proxy
        return httpx.Limits(
            max_connections=proxy.max_connections,
            max_keepalive_connections=proxy.max_keepalive_connections,
        )

    upstream_limits = property(get_upstream_limits)
