"""Stream service — relays upstream media through the panel with range and manifest handling."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlparse

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.types import Receive, Scope, Send

from app.models.xtream import CONTENT_TYPES, DEFAULT_CONTENT_TYPE
from app.services.manifest_service import is_manifest_content_type, is_manifest_url, rewrite_manifest

if TYPE_CHECKING:
    from app.services.config_service import ConfigService
    from app.services.http_client import HttpClientService

logger = logging.getLogger(__name__)

# Non-standard status used by nginx for "client closed request"
CLIENT_CLOSED_REQUEST = 499
PARTIAL_CONTENT = 206
RANGE_NOT_SATISFIABLE = 416

RANGE_HEADERS = ("accept-ranges", "content-range")


class ClientDisconnected(Exception):
    """The caller went away before upstream headers arrived."""


def _host(url: str) -> str:
    return urlparse(url).netloc or url


class UpstreamStreamingResponse(StreamingResponse):
    """StreamingResponse that always releases its upstream response.

    Starlette stops iterating the body when the client disconnects; the
    upstream connection is closed once the response has finished, whether
    it completed, failed or was cut short.
    """

    def __init__(self, upstream: httpx.Response, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.upstream = upstream

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self.upstream.aclose()
            logger.debug(f"Upstream {_host(str(self.upstream.url))} released")


class StreamProxyService:
    """Fetches origin media with the shared client and relays it to the caller.

    Per request: fetch (forwarding ``Range``), retry once without the range
    on 416, then either rewrite an HLS manifest or stream the body through.
    """

    def __init__(self, config_service: "ConfigService", http_client: "HttpClientService"):
        self.config_service = config_service
        self.http_client = http_client

    @property
    def options(self):
        return self.config_service.settings.proxy

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    async def _fetch(self, request: Request, url: str, headers: dict[str, str]) -> httpx.Response:
        """GET *url* reading headers only; abort if the caller disconnects first."""
        client = await self.http_client.get_client()
        upstream_request = client.build_request("GET", url, headers=headers)
        task = asyncio.ensure_future(client.send(upstream_request, stream=True))
        try:
            while not task.done():
                await asyncio.wait({task}, timeout=self.options.disconnect_poll_interval)
                if not task.done() and await request.is_disconnected():
                    raise ClientDisconnected()
        except BaseException:
            task.cancel()
            # The send may have completed while we were checking the caller
            if task.done() and not task.cancelled() and task.exception() is None:
                await task.result().aclose()
            raise
        return task.result()

    async def proxy(
        self,
        request: Request,
        origin_url: str,
        ext: Optional[str] = None,
        origin_headers: Optional[dict[str, str]] = None,
    ) -> Response:
        headers = dict(origin_headers or {})
        range_header = request.headers.get("range")
        if range_header:
            headers["Range"] = range_header

        try:
            upstream = await self._fetch(request, origin_url, headers)
            if upstream.status_code == RANGE_NOT_SATISFIABLE and range_header:
                logger.info(f"Upstream {_host(origin_url)} rejected range {range_header!r}, retrying without it")
                await upstream.aclose()
                headers.pop("Range")
                range_header = None
                upstream = await self._fetch(request, origin_url, headers)
        except ClientDisconnected:
            logger.debug(f"Client left while waiting for {_host(origin_url)}")
            return Response(status_code=CLIENT_CLOSED_REQUEST)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Upstream fetch failed for {_host(origin_url)}: {e!r}")
            return JSONResponse({"error": "Failed to fetch stream", "details": str(e)}, status_code=502)

        return await self._relay(upstream, origin_url, ext, range_forwarded=bool(range_header))

    # ------------------------------------------------------------------
    # Relay
    # ------------------------------------------------------------------

    @staticmethod
    def content_type_for(ext: Optional[str], upstream: httpx.Response) -> str:
        if ext and ext.lower() in CONTENT_TYPES:
            return CONTENT_TYPES[ext.lower()]
        return upstream.headers.get("content-type") or DEFAULT_CONTENT_TYPE

    async def _relay(
        self,
        upstream: httpx.Response,
        origin_url: str,
        ext: Optional[str],
        range_forwarded: bool,
    ) -> Response:
        if not upstream.is_success:
            logger.warning(f"Upstream {_host(origin_url)} returned {upstream.status_code}")
            await upstream.aclose()
            return Response(status_code=upstream.status_code)

        content_type = self.content_type_for(ext, upstream)
        if is_manifest_content_type(content_type) or is_manifest_url(origin_url):
            return await self._relay_manifest(upstream, origin_url, content_type)

        headers = {"Cache-Control": "no-cache, no-store", "X-Accel-Buffering": "no"}
        if "content-length" in upstream.headers:
            headers["Content-Length"] = upstream.headers["content-length"]
        if "content-encoding" in upstream.headers:
            headers["Content-Encoding"] = upstream.headers["content-encoding"]
        # Only for a range the upstream honored
        if range_forwarded and upstream.status_code == PARTIAL_CONTENT:
            for name in RANGE_HEADERS:
                if name in upstream.headers:
                    headers[name.title()] = upstream.headers[name]

        chunk_size = self.options.chunk_size

        async def relay():
            sent = 0
            try:
                async for chunk in upstream.aiter_raw(chunk_size):
                    if chunk:
                        sent += len(chunk)
                        yield chunk
            except httpx.HTTPError as e:
                logger.warning(f"Upstream {_host(origin_url)} read interrupted after {sent} bytes: {e!r}")
                raise

        return UpstreamStreamingResponse(
            upstream,
            relay(),
            status_code=upstream.status_code,
            headers=headers,
            media_type=content_type,
        )

    async def _relay_manifest(self, upstream: httpx.Response, origin_url: str, content_type: str) -> Response:
        try:
            await upstream.aread()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to read manifest from {_host(origin_url)}: {e!r}")
            return JSONResponse({"error": "Failed to fetch stream", "details": str(e)}, status_code=502)
        finally:
            await upstream.aclose()

        # Anchor at the final URL so references survive upstream redirects
        rewritten = rewrite_manifest(upstream.text, str(upstream.url))
        return Response(
            content=rewritten,
            status_code=upstream.status_code,
            media_type=content_type,
            headers={"Cache-Control": "no-cache, no-store"},
        )
