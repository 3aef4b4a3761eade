# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/services/upload/multipart.py
from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Any, AsyncGenerator, AsyncIterator, Deque, Dict, Optional, Tuple

from python_multipart.multipart import MultipartParser, parse_options_header

# Eventos internos del parser
_PART = "part"
_DATA = "data"
_END = "end"


class TruncatedBody(Exception):
    """El body terminó antes del boundary de cierre de la parte."""


@dataclass
class FilePart:
    field_name: str
    filename: str
    content_type: str
    stream: AsyncGenerator[bytes, None]


class MultipartDecoder:
    """
    Adaptador pull sobre el parser push de python-multipart.
    Solo se parsea el siguiente chunk del body cuando el consumidor lo pide,
    así el tamaño acumulado se puede chequear a medida que llegan los datos.
    """

    def __init__(self, boundary: bytes, chunks: AsyncIterator[bytes]) -> None:
        self._chunks = chunks
        self._events: Deque[Tuple[str, Any]] = deque()
        self._exhausted = False
        self._headers: Dict[bytes, bytes] = {}
        self._field = b""
        self._value = b""
        self._parser = MultipartParser(
            boundary,
            callbacks={
                "on_part_begin": self._on_part_begin,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_headers_finished": self._on_headers_finished,
                "on_part_data": self._on_part_data,
                "on_part_end": self._on_part_end,
            },
        )

    # --- callbacks del parser ---
    def _on_part_begin(self) -> None:
        self._headers = {}
        self._field = self._value = b""

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._value += data[start:end]

    def _on_header_end(self) -> None:
        self._headers[self._field.lower()] = self._value
        self._field = self._value = b""

    def _on_headers_finished(self) -> None:
        self._events.append((_PART, self._headers))

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        if end > start:
            self._events.append((_DATA, bytes(data[start:end])))

    def _on_part_end(self) -> None:
        self._events.append((_END, None))

    # --- lado pull ---
    async def _next_event(self) -> Optional[Tuple[str, Any]]:
        while not self._events:
            if self._exhausted:
                return None
            try:
                chunk = await self._chunks.__anext__()
            except StopAsyncIteration:
                self._exhausted = True
                self._parser.finalize()
                continue
            self._parser.write(chunk)
        return self._events.popleft()

    async def _part_body(self) -> AsyncGenerator[bytes, None]:
        while True:
            event = await self._next_event()
            if event is None:
                raise TruncatedBody("multipart body ended before the closing boundary")
            kind, payload = event
            if kind == _END:
                return
            if kind == _DATA:
                yield payload

    async def _skip_part(self) -> None:
        async for _ in self._part_body():
            pass

    async def find_file_part(self, field_name: str) -> Optional[FilePart]:
        """Primera parte con ese nombre de campo y con filename; None si no aparece."""
        while True:
            event = await self._next_event()
            if event is None:
                return None
            kind, headers = event
            if kind != _PART:
                continue
            _, disposition = parse_options_header(headers.get(b"content-disposition", b""))
            name = disposition.get(b"name", b"").decode("utf-8", "replace")
            filename = disposition.get(b"filename")
            if name != field_name or filename is None:
                await self._skip_part()
                continue
            ctype, _ = parse_options_header(headers.get(b"content-type", b""))
            return FilePart(
                field_name=name,
                filename=filename.decode("utf-8", "replace"),
                content_type=ctype.decode("latin-1"),
                stream=self._part_body(),
            )


def multipart_boundary(content_type_header: str | None) -> Optional[bytes]:
    """Boundary del header Content-Type; None si no es multipart/form-data."""
    ctype, options = parse_options_header(content_type_header)
    if ctype != b"multipart/form-data":
        return None
    return options.get(b"boundary") or None


def open_file_part_decoder(content_type_header: str | None, chunks: AsyncIterator[bytes]) -> Optional[MultipartDecoder]:
    boundary = multipart_boundary(content_type_header)
    if boundary is None:
        return None
    return MultipartDecoder(boundary, chunks)
