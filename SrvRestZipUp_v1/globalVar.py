# -*- coding: utf-8 -*-
# zipup / globalVar.py

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

# =========================
# App / entorno
# =========================
APP_NAME: str = "zipup"
RUN_ENV: Literal["dev", "stg", "prod"] = os.environ.get("ZIPUP_RUN_ENV", "dev")  # type: ignore[assignment]

DEBUG: bool = RUN_ENV != "prod"
LOG_LEVEL: str = "DEBUG" if DEBUG else "INFO"

# =========================
# Servidor API
# =========================
HOST: str = "0.0.0.0"
PUERTO: int = int(os.environ.get("ZIPUP_PORT", "3500"))

CORS_PROD_ORIGINS: tuple[str, ...] = ("https://tu-dominio-front.com",)

# =========================
# Uploads
# =========================
# Relativo al directorio de trabajo del proceso
UPLOAD_DIR: str = os.environ.get("ZIPUP_UPLOAD_DIR", "uploads")
UPLOAD_FIELD: str = "file"
MAX_FILE_SIZE: int = int(os.environ.get("ZIPUP_MAX_FILE_SIZE", str(800 * 1024 * 1024)))
ALLOWED_MIME_TYPES: frozenset[str] = frozenset({"application/zip", "application/x-zip-compressed"})
CHUNK_SIZE: int = 1024 * 1024


@dataclass(frozen=True)
class UploadSettings:
    """Configuración inmutable; se construye una vez al arrancar y se pasa a cada ruta."""
    upload_dir: Path
    max_file_size: int = MAX_FILE_SIZE
    allowed_mime_types: frozenset[str] = ALLOWED_MIME_TYPES
    upload_field: str = UPLOAD_FIELD
    chunk_size: int = CHUNK_SIZE
    host: str = HOST
    port: int = PUERTO
    debug: bool = DEBUG
    log_level: str = LOG_LEVEL


# =========================
# Helpers
# =========================
def load_settings(upload_dir: str | Path | None = None, **overrides) -> UploadSettings:
    """Resuelve el directorio de uploads a ruta absoluta y congela la config."""
    base = Path(upload_dir if upload_dir is not None else UPLOAD_DIR)
    return UploadSettings(upload_dir=base.resolve(), **overrides)

def ensure_local_dirs(settings: UploadSettings) -> None:
    """Crea la carpeta de uploads si no existe."""
    settings.upload_dir.mkdir(parents=True, exist_ok=True)

def is_prod() -> bool:
    return RUN_ENV == "prod"

def boot_log(settings: UploadSettings) -> None:
    print(f"[{APP_NAME}] env={RUN_ENV} debug={settings.debug} log={settings.log_level}")
    print(f"[{APP_NAME}] listening=http://{settings.host}:{settings.port}")
    print(f"[{APP_NAME}] upload_dir={settings.upload_dir}")
    print(f"[{APP_NAME}] max_file_size={settings.max_file_size} allowed={sorted(settings.allowed_mime_types)}")
