# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/ls_zipup_Srv01.py
# gunicorn ls_zipup_Srv01:app --workers 4 --worker-class uvicorn.workers.UvicornWorker --bind 0.0.0.0:3500
from __future__ import annotations
from typing import Callable

from litestar import Litestar
from litestar.config.cors import CORSConfig
from litestar.logging.config import LoggingConfig
import uvicorn
import globalVar as Var

from routes.v1.service_info import build_service_info_route
from routes.v1.uploads_zip import build_upload_route
from services.upload.naming import capture_timestamp_ms


def _cors_config(settings: Var.UploadSettings) -> CORSConfig:
    if settings.debug:
        return CORSConfig(
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["Content-Type"],
            allow_credentials=False,
            max_age=86400,
        )
    return CORSConfig(
        allow_origins=list(Var.CORS_PROD_ORIGINS),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Accept", "Content-Type", "X-Requested-With"],
        expose_headers=["Content-Type"],
        allow_credentials=False,
        max_age=86400,
    )


def create_app(settings: Var.UploadSettings, clock: Callable[[], int] = capture_timestamp_ms) -> Litestar:
    """Arma la app con una config ya congelada; las rutas la reciben explícita."""

    def _startup() -> None:
        Var.ensure_local_dirs(settings)
        Var.boot_log(settings)

    logging_config = LoggingConfig(
        loggers={
            Var.APP_NAME: {"level": settings.log_level, "handlers": ["queue_listener"], "propagate": False},
        },
        log_exceptions="debug",
    )

    return Litestar(
        route_handlers=[
            build_service_info_route(settings),
            build_upload_route(settings, clock=clock),
        ],
        cors_config=_cors_config(settings),
        logging_config=logging_config,
        on_startup=[_startup],
        debug=settings.debug,
    )


app = create_app(Var.load_settings())

if __name__ == "__main__":
    uvicorn.run(
        "ls_zipup_Srv01:app",
        host=Var.HOST,
        port=Var.PUERTO,
        reload=Var.DEBUG,
    )
