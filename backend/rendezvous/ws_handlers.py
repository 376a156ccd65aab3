"""
Цикл WebSocket-подключения: регистрация, приём сообщений, снятие при отключении.
"""
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from .broker import Broker
from .ws_manager import WebSocketTransport

logger = logging.getLogger(__name__)


async def ws_loop(ws: WebSocket, broker: Broker) -> None:
    await ws.accept()
    transport = WebSocketTransport(ws)
    conn = broker.connect(transport)
    if conn is None:
        logger.info("WS: shutting down, refusing %s", ws.client)
        await ws.close(code=1012)
        return
    transport.start()
    try:
        while True:
            msg = await ws.receive()
            if msg["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(msg.get("code", 1000), msg.get("reason"))
            raw = msg.get("text")
            if raw is None:
                raw = msg.get("bytes")
            if raw is not None:
                broker.handle_message(conn, raw)
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s reason=%s conn=%s", e.code, e.reason or "", conn.id)
    except Exception as e:
        logger.exception("WS: error conn=%s: %s", conn.id, e)
    finally:
        transport.mark_closed()
        broker.disconnect(conn)
