"""EPG / XMLTV routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from app.dependencies import get_epg_service, get_xtream_service
from app.services.epg_service import EpgService
from app.services.xtream_service import XtreamService

router = APIRouter(tags=["epg"])


@router.get("/xmltv.php")
async def get_xmltv(
    username: str = "",
    password: str = "",
    xtream: XtreamService = Depends(get_xtream_service),
    epg: EpgService = Depends(get_epg_service),
):
    if not xtream.validate_credentials(username, password):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    data = epg.xmltv(xtream.catalog)
    return Response(content=data, media_type="application/xml", headers={"Content-Type": "application/xml; charset=utf-8"})
