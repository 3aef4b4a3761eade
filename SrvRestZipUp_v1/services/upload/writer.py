# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/services/upload/writer.py
from __future__ import annotations
import logging
import os
from contextlib import aclosing
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncGenerator, Tuple

import anyio
from anyio import AsyncFile

from .naming import resolve_stored_name
from .outcomes import Aborted, IOFailure, StoredFile, Success, UploadOutcome
from .validation import check_size

logger = logging.getLogger("zipup.writer")

MAX_NAME_ATTEMPTS = 16


async def _open_exclusive(directory: Path, declared_filename: str, timestamp_ms: int) -> Tuple[Path, str, AsyncFile]:
    """
    Crea el destino con "xb" (nunca pisa un archivo existente).
    Si el nombre ya existe (mismo stem, mismo ms) se corre el timestamp 1 ms.
    """
    for attempt in range(MAX_NAME_ATTEMPTS):
        stored_name = resolve_stored_name(declared_filename, timestamp_ms + attempt)
        path = directory / stored_name
        try:
            return path, stored_name, await anyio.open_file(path, "xb")
        except FileExistsError:
            logger.info("colisión de nombre %s, reintentando con ts+1", stored_name)
    raise FileExistsError(f"no free name after {MAX_NAME_ATTEMPTS} attempts")


async def _discard(path: Path) -> None:
    try:
        await anyio.Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.error("no se pudo borrar parcial %s: %s", path.name, e)


async def persist_stream(
    stream: AsyncGenerator[bytes, None],
    directory: Path,
    declared_filename: str,
    timestamp_ms: int,
    *,
    max_bytes: int,
    cancel: anyio.Event,
) -> UploadOutcome:
    """
    Copia el stream a disco por chunks (memoria acotada).
      - tamaño chequeado ANTES de escribir cada chunk
      - cancel seteado -> deja de consumir y devuelve Aborted
      - OSError -> IOFailure
    Cualquier resultado que no sea Success borra el parcial.
    Otras excepciones del stream (parser) se propagan después de borrar el parcial.
    """
    try:
        path, stored_name, out = await _open_exclusive(directory, declared_filename, timestamp_ms)
    except OSError as e:
        logger.error("no se pudo crear destino: %s: %s", type(e).__name__, e)
        return IOFailure(reason="cannot create destination file")

    written = 0
    outcome: UploadOutcome | None = None
    try:
        async with out, aclosing(stream):
            async for chunk in stream:
                if cancel.is_set():
                    break
                exceeded = check_size(written + len(chunk), max_bytes)
                if exceeded is not None:
                    outcome = exceeded
                    break
                await out.write(chunk)
                written += len(chunk)
            if outcome is None and cancel.is_set():
                outcome = Aborted(bytes_received=written)
            if outcome is None:
                await out.flush()
                await anyio.to_thread.run_sync(os.fsync, out.wrapped.fileno())
    except OSError as e:
        logger.error("error de escritura en %s: %s: %s", stored_name, type(e).__name__, e)
        outcome = IOFailure(reason="write failed")
    except Exception:
        await _discard(path)
        if cancel.is_set():
            return Aborted(bytes_received=written)
        raise
    except BaseException:
        # cancelación del task: limpiar igual y propagar
        with anyio.CancelScope(shield=True):
            await _discard(path)
        raise

    if outcome is not None:
        await _discard(path)
        return outcome

    return Success(
        stored=StoredFile(
            path=path,
            stored_name=stored_name,
            bytes_written=written,
            created_at=datetime.now(timezone.utc),
        )
    )
