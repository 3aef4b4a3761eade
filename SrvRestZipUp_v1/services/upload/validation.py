# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/services/upload/validation.py
from __future__ import annotations
from typing import Optional

from .outcomes import SizeExceeded, ValidationRejected


def normalize_mime(declared: str | None) -> str:
    return (declared or "").split(";", 1)[0].strip().lower()


def check_declared_type(declared_mime: str | None, allowed: frozenset[str]) -> Optional[ValidationRejected]:
    """Solo mira el content-type declarado por el cliente (no hay sniffing del contenido)."""
    if normalize_mime(declared_mime) in allowed:
        return None
    return ValidationRejected(reason="only ZIP files are allowed")


def check_size(bytes_read: int, ceiling: int) -> Optional[SizeExceeded]:
    if bytes_read > ceiling:
        return SizeExceeded(limit=ceiling)
    return None
