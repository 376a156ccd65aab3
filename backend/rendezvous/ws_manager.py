"""
WebSocket-транспорт: неблокирующая отправка через очередь и задачу-писателя.
"""
import asyncio
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)

_CLOSE = object()

# Сколько сообщений может ждать отправки клиенту, который не читает
OUTBOX_LIMIT = 256


class WebSocketTransport:
    def __init__(self, ws: WebSocket, outbox_limit: int = OUTBOX_LIMIT):
        self.ws = ws
        self._outbox: asyncio.Queue = asyncio.Queue(maxsize=outbox_limit)
        self._closing = False
        self._writer: asyncio.Task | None = None

    def start(self) -> None:
        self._writer = asyncio.create_task(self._write_loop())

    @property
    def is_live(self) -> bool:
        return (
            not self._closing
            and self.ws.client_state == WebSocketState.CONNECTED
            and self.ws.application_state == WebSocketState.CONNECTED
        )

    def send_text(self, text: str) -> None:
        if self._closing:
            return
        try:
            self._outbox.put_nowait(text)
        except asyncio.QueueFull:
            logger.warning("WS: outbox full for %s, message dropped", self.ws.client)

    def close(self) -> None:
        """Закрыть после отправки уже поставленных сообщений."""
        if self._closing:
            return
        self._closing = True
        if self._outbox.full():
            self._outbox.get_nowait()
        self._outbox.put_nowait(_CLOSE)

    def mark_closed(self) -> None:
        """Клиент ушёл: больше ничего не отправляем."""
        self._closing = True
        if self._writer is not None and not self._writer.done():
            self._writer.cancel()

    async def _write_loop(self) -> None:
        while True:
            item = await self._outbox.get()
            if item is _CLOSE:
                try:
                    await self.ws.close(code=1001)
                except Exception as e:
                    logger.debug("WS: close failed: %s", e)
                return
            try:
                await self.ws.send_text(item)
            except Exception as e:
                logger.warning("WS: send failed to %s: %s", self.ws.client, e)
