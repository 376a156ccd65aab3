"""
Брокер: владеет реестром, очередью и комнатами и разбирает сообщения клиентов.
Все операции синхронные, поэтому обработка одного сообщения не прерывается другим.
"""
import logging
from typing import Any, Callable

from . import messages
from .constants import DEFAULT_DISPLAY_NAME
from .errors import BrokerError
from .matchmaking import MatchmakingQueue
from .messages import RELAY_TYPES, Inbound, InboundType
from .reaper import Reaper
from .registry import Connection, ConnectionRegistry, Transport
from .relay import relay
from .rematch import RematchCoordinator
from .sessions import SessionTable

logger = logging.getLogger(__name__)


def _display_name(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return DEFAULT_DISPLAY_NAME


class Broker:
    def __init__(self, max_room_age_seconds: float = 24 * 60 * 60):
        self.registry = ConnectionRegistry()
        self.sessions = SessionTable()
        self.queue = MatchmakingQueue(self.sessions)
        self.rematch = RematchCoordinator(self.sessions)
        self.reaper = Reaper(self.sessions, max_room_age_seconds)
        self.accepting = True
        self._handlers: dict[InboundType, Callable[[Connection, Inbound], None]] = {
            InboundType.JOIN_PUBLIC: self._on_join_public,
            InboundType.LEAVE_PUBLIC: self._on_leave_public,
            InboundType.CREATE_PRIVATE: self._on_create_private,
            InboundType.JOIN_PRIVATE: self._on_join_private,
            **{kind: self._on_relay for kind in RELAY_TYPES},
            InboundType.READY_FOR_NEW_GAME: self._on_ready_for_new_game,
        }

    # -------------------- Подключения --------------------

    def connect(self, transport: Transport) -> Connection | None:
        """Зарегистрировать подключение. None — если брокер уже останавливается."""
        if not self.accepting:
            transport.close()
            return None
        conn = self.registry.register(transport)
        logger.info("New client connected (conn %s)", conn.id)
        return conn

    def disconnect(self, conn: Connection) -> None:
        """Снять подключение отовсюду. Повторный вызов безопасен."""
        self.queue.dequeue(conn)
        self.sessions.handle_disconnect(conn)
        self.registry.unregister(conn)
        logger.info("Client disconnected (conn %s)", conn.id)

    def shutdown(self) -> int:
        """Разослать serverShutdown всем и закрыть подключения."""
        if not self.accepting:
            return 0
        self.accepting = False
        notified = 0
        for conn in self.registry:
            if conn.send(messages.server_shutdown()):
                notified += 1
            conn.transport.close()
        logger.info("Shutdown: notified %s connections", notified)
        return notified

    # -------------------- Сообщения --------------------

    def handle_message(self, conn: Connection, raw: str | bytes) -> None:
        """
        Обработать одно сообщение клиента.
        Битые сообщения и неизвестные типы отбрасываются без ответа.
        """
        if not self.accepting:
            return
        msg = messages.parse_inbound(raw)
        if msg is None:
            return
        logger.debug("msg from conn %s type=%s", conn.id, msg.kind.value)
        handler = self._handlers.get(msg.kind)
        if handler is None:
            logger.warning("no handler for %s", msg.kind.value)
            return
        try:
            handler(conn, msg)
        except BrokerError as e:
            logger.info("conn %s %s: %s", conn.id, msg.kind.value, type(e).__name__)
            conn.send(e.to_message())
        except Exception:
            logger.exception("Error handling %s from conn %s", msg.kind.value, conn.id)
            conn.send(messages.error("Server error occurred"))

    def _leave_current(self, conn: Connection) -> None:
        """Подключение начинает новый подбор: выйти из очереди и старой комнаты."""
        self.queue.dequeue(conn)
        self.sessions.handle_disconnect(conn)

    def _on_join_public(self, conn: Connection, msg: Inbound) -> None:
        if conn not in self.queue:
            self._leave_current(conn)
        self.queue.enqueue_public(conn, _display_name(msg.display_name))

    def _on_leave_public(self, conn: Connection, msg: Inbound) -> None:
        self.queue.dequeue(conn)

    def _on_create_private(self, conn: Connection, msg: Inbound) -> None:
        self._leave_current(conn)
        conn.display_name = _display_name(msg.display_name)
        self.sessions.create_private(msg.room_id, conn)

    def _on_join_private(self, conn: Connection, msg: Inbound) -> None:
        conn.display_name = _display_name(msg.display_name)
        if conn.session_id is not None and msg.room_id == conn.session_id:
            return
        self._leave_current(conn)
        self.sessions.join_private(msg.room_id, conn)

    def _on_relay(self, conn: Connection, msg: Inbound) -> None:
        relay(self.sessions, conn, msg.room_id, msg.raw)

    def _on_ready_for_new_game(self, conn: Connection, msg: Inbound) -> None:
        self.rematch.request_rematch(conn, msg.room_id, msg.data.get("reqId"))

    # -------------------- Статистика --------------------

    def stats(self) -> dict[str, int]:
        return {
            "activeRooms": len(self.sessions),
            "waitingPlayers": len(self.queue),
            "totalGamesPlayed": self.rematch.completed_games,
            "totalPlayersJoined": self.registry.total_joined,
        }

    def log_stats(self) -> None:
        s = self.stats()
        logger.info(
            "Stats: %s active rooms, %s waiting players, %s games, %s players joined",
            s["activeRooms"], s["waitingPlayers"], s["totalGamesPlayed"], s["totalPlayersJoined"],
        )
