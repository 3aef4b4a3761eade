# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/services/upload/lifecycle.py
from __future__ import annotations
import logging
from typing import AsyncGenerator, Optional

import anyio
from litestar.types import Receive

logger = logging.getLogger("zipup.lifecycle")


class ConnectionMonitor:
    """
    Envuelve el canal `receive` de ASGI para una request:
      - body_chunks(): entrega el body por chunks a medida que llega
      - aborted: evento que se dispara si el cliente corta antes de terminar el body
      - closed(): log informativo al terminar el handler
    El evento `aborted` es la señal de cancelación que observa el writer.
    """

    def __init__(self, receive: Receive, client: Optional[str] = None) -> None:
        self._receive = receive
        self.client = client or "-"
        self.aborted = anyio.Event()
        self.body_complete = False
        self.bytes_received = 0

    async def body_chunks(self) -> AsyncGenerator[bytes, None]:
        while not self.body_complete and not self.aborted.is_set():
            message = await self._receive()
            if message["type"] == "http.disconnect":
                self.aborted.set()
                logger.warning("upload interrumpido (cliente desconectado): %s", self.client)
                return
            if message["type"] != "http.request":
                continue
            body = message.get("body", b"")
            if not message.get("more_body", False):
                self.body_complete = True
            if body:
                self.bytes_received += len(body)
                yield body

    def closed(self) -> None:
        logger.info("conexión cerrada: %s (aborted=%s, bytes=%d)", self.client, self.aborted.is_set(), self.bytes_received)
