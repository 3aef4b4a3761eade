# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/services/upload/naming.py
from __future__ import annotations
import re
import time
from pathlib import PurePosixPath

# \w incluye letras unicode: "报告.zip" se conserva tal cual
SAFE_NAME_RX = re.compile(r"[^\w.-]+")
DRIVE_RX = re.compile(r"^[A-Za-z]:")

DEFAULT_STEM = "upload"
MAX_STEM_BYTES = 180  # deja margen para "_<timestamp><ext>" dentro de 255 bytes
MAX_EXT_BYTES = 16


def capture_timestamp_ms() -> int:
    return time.time_ns() // 1_000_000


def _basename(name: str | None) -> str:
    """Último segmento del nombre declarado (sirve para '/' y '\\', sin letra de unidad)."""
    raw = DRIVE_RX.sub("", (name or "").replace("\\", "/"))
    return raw.rsplit("/", 1)[-1]


def _truncate_utf8(text: str, limit: int) -> str:
    return text.encode("utf-8")[:limit].decode("utf-8", "ignore")


def sanitize_filename(name: str | None) -> str:
    return SAFE_NAME_RX.sub("_", _basename(name))


def split_name(declared_filename: str | None) -> tuple[str, str]:
    """Separa stem/extensión sobre el nombre crudo y recién ahí limpia cada parte."""
    base = _basename(declared_filename)
    p = PurePosixPath(base)
    stem, ext = p.stem, p.suffix
    if len(ext.encode("utf-8")) > MAX_EXT_BYTES:
        stem, ext = base, ""
    stem = _truncate_utf8(SAFE_NAME_RX.sub("_", stem).strip("._"), MAX_STEM_BYTES).strip("._")
    return stem or DEFAULT_STEM, SAFE_NAME_RX.sub("_", ext)


def resolve_stored_name(declared_filename: str | None, timestamp_ms: int) -> str:
    """
    Nombre destino: <stem>_<timestamp_ms><ext>.
    Nunca contiene separadores de ruta ni puede ser '.'/'..'.
    """
    stem, ext = split_name(declared_filename)
    return f"{stem}_{timestamp_ms}{ext}"
