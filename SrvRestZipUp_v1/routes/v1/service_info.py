# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/routes/v1/service_info.py
from __future__ import annotations
from typing import Any, Dict

from litestar import get
from litestar.enums import MediaType
from litestar.handlers import HTTPRouteHandler

from globalVar import UploadSettings


def build_service_info_route(settings: UploadSettings) -> HTTPRouteHandler:
    # endpoints anunciados: ilustrativos (la ruta real de upload es /api/upload)
    payload: Dict[str, Any] = {
        "status": "success",
        "message": "Welcome to the file upload service",
        "endpoints": {
            "upload": "/upload",
            "files": "/files",
        },
        "uploadDirectory": str(settings.upload_dir),
    }

    @get("/", media_type=MediaType.JSON)
    async def service_info() -> Dict[str, Any]:
        return payload

    return service_info
