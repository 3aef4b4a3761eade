# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/services/upload/responder.py
from __future__ import annotations
from typing import Any, Callable, Dict, Optional, Tuple

from python_multipart.exceptions import MultipartParseError

from .multipart import TruncatedBody
from .outcomes import IOFailure, MalformedRequest, OutcomeKind, UploadOutcome

Payload = Dict[str, Any]


def _bad(msg: str) -> Payload:
    return {"ok": False, "error": msg}


# tag -> (status, armado del body). Aborted no tiene respuesta: el cliente ya no está.
_RESPONDERS: Dict[OutcomeKind, Tuple[Optional[int], Callable[[Any], Optional[Payload]]]] = {
    OutcomeKind.SUCCESS: (200, lambda o: {
        "ok": True,
        "message": "success",
        "file": o.stored.stored_name,
        "bytes_written": o.stored.bytes_written,
    }),
    OutcomeKind.VALIDATION_REJECTED: (400, lambda o: _bad(o.reason)),
    OutcomeKind.SIZE_EXCEEDED: (400, lambda o: _bad(f"file exceeds the {o.limit} byte limit")),
    OutcomeKind.MALFORMED_REQUEST: (400, lambda o: _bad(o.reason)),
    OutcomeKind.ABORTED: (None, lambda o: None),
    OutcomeKind.IO_FAILURE: (500, lambda o: _bad("upload failed")),
}


def respond(outcome: UploadOutcome) -> Tuple[Optional[int], Optional[Payload]]:
    """(status, body) para el outcome; (None, None) si no hay que responder."""
    status, build = _RESPONDERS[outcome.kind]
    return status, build(outcome)


def classify_exception(exc: BaseException) -> UploadOutcome:
    """Cualquier excepción que llegue al borde del handler termina en un outcome."""
    if isinstance(exc, (MultipartParseError, TruncatedBody)):
        return MalformedRequest(reason="malformed multipart body")
    if isinstance(exc, OSError):
        return IOFailure(reason="filesystem error")
    return IOFailure(reason=f"unexpected {type(exc).__name__}")
