# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/routes/v1/uploads_zip.py
from __future__ import annotations
import logging
from contextlib import aclosing
from typing import Callable, Optional

from litestar import Request, asgi
from litestar.enums import MediaType
from litestar.handlers import ASGIRouteHandler
from litestar.response.base import ASGIResponse
from litestar.serialization import encode_json
from litestar.types import Receive, Scope, Send

from globalVar import UploadSettings
from services.upload.lifecycle import ConnectionMonitor
from services.upload.multipart import MultipartDecoder, open_file_part_decoder
from services.upload.naming import capture_timestamp_ms
from services.upload.outcomes import Aborted, MalformedRequest, OutcomeKind, UploadOutcome
from services.upload.responder import classify_exception, respond
from services.upload.validation import check_declared_type
from services.upload.writer import persist_stream

logger = logging.getLogger("zipup.upload")


async def _handle_upload(
    request: Request,
    settings: UploadSettings,
    monitor: ConnectionMonitor,
    clock: Callable[[], int],
) -> UploadOutcome:
    # 0) Chequear content-type de la request; el body se cierra siempre al salir
    async with aclosing(monitor.body_chunks()) as chunks:
        decoder = open_file_part_decoder(request.headers.get("content-type"), chunks)
        return await _consume_file_part(decoder, settings, monitor, clock)


async def _consume_file_part(
    decoder: Optional[MultipartDecoder],
    settings: UploadSettings,
    monitor: ConnectionMonitor,
    clock: Callable[[], int],
) -> UploadOutcome:
    if decoder is None:
        return MalformedRequest(reason="expected multipart/form-data")

    # 1) Buscar la parte del archivo
    part = await decoder.find_file_part(settings.upload_field)
    if part is None:
        if monitor.aborted.is_set():
            return Aborted(bytes_received=monitor.bytes_received)
        return MalformedRequest(reason=f"missing '{settings.upload_field}' file field")

    # 2) Validar tipo declarado antes de tocar disco
    rejected = check_declared_type(part.content_type, settings.allowed_mime_types)
    if rejected is not None:
        logger.warning("rechazado %s (%s) desde %s", part.filename, part.content_type, monitor.client)
        return rejected

    # 3) Guardar en streaming
    return await persist_stream(
        part.stream,
        settings.upload_dir,
        part.filename,
        clock(),
        max_bytes=settings.max_file_size,
        cancel=monitor.aborted,
    )


def _log_outcome(outcome: UploadOutcome, monitor: ConnectionMonitor) -> None:
    if outcome.kind is OutcomeKind.SUCCESS:
        logger.info("upload ok: %s %s (%d bytes)", monitor.client, outcome.stored.stored_name, outcome.stored.bytes_written)
    elif outcome.kind is OutcomeKind.ABORTED:
        logger.warning("upload abortado: %s tras %d bytes", monitor.client, monitor.bytes_received)
    elif outcome.kind is OutcomeKind.IO_FAILURE:
        logger.error("upload falló: %s (%s)", monitor.client, outcome.reason)
    else:
        logger.warning("upload rechazado: %s (%s)", monitor.client, outcome.kind.value)


async def _send_json(scope: Scope, receive: Receive, send: Send, status: int, body: dict) -> None:
    response = ASGIResponse(body=encode_json(body), status_code=status, media_type=MediaType.JSON)
    await response(scope, receive, send)


def build_upload_route(
    settings: UploadSettings,
    clock: Callable[[], int] = capture_timestamp_ms,
) -> ASGIRouteHandler:
    """
    POST /api/upload  (multipart/form-data)
      - file: .zip (application/zip | application/x-zip-compressed)

    Ruta ASGI cruda: lee el canal receive directamente para detectar
    el corte del cliente y, si pasa, no manda respuesta.
    """

    @asgi("/api/upload", copy_scope=False)
    async def upload_zip(scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("method") != "POST":
            await _send_json(scope, receive, send, 405, {"ok": False, "error": "method not allowed"})
            return

        request: Request = Request(scope, receive, send)
        client = request.client.host if request.client else None
        monitor = ConnectionMonitor(receive, client)
        logger.debug("upload desde %s ua=%s", client, request.headers.get("user-agent", "-"))

        try:
            try:
                outcome = await _handle_upload(request, settings, monitor, clock)
            except Exception as e:
                if monitor.aborted.is_set():
                    outcome = Aborted(bytes_received=monitor.bytes_received)
                else:
                    logger.exception("[upload_zip] ERROR: %s: %s", type(e).__name__, e)
                    outcome = classify_exception(e)

            _log_outcome(outcome, monitor)
            status, body = respond(outcome)
            if status is None or monitor.aborted.is_set():
                return
            await _send_json(scope, receive, send, status, body)
        finally:
            monitor.closed()

    return upload_zip
