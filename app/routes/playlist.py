"""Playlist routes — M3U export with proxy URLs."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from app.dependencies import get_base_url, get_m3u_service, get_xtream_service
from app.services.m3u_service import M3uService
from app.services.xtream_service import XtreamService

router = APIRouter(tags=["playlist"])


@router.get("/get.php")
async def playlist(
    username: str = "",
    password: str = "",
    type: Optional[str] = None,
    output: Optional[str] = None,
    xtream: XtreamService = Depends(get_xtream_service),
    m3u: M3uService = Depends(get_m3u_service),
    base_url: str = Depends(get_base_url),
):
    if not xtream.validate_credentials(username, password):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    m3u_content = m3u.generate_m3u(username, password, base_url, playlist_type=type, output=output)
    return Response(
        content=m3u_content,
        media_type="audio/x-mpegurl",
        headers={"Content-Disposition": 'attachment; filename="playlist.m3u"', "Cache-Control": "no-cache"},
    )
