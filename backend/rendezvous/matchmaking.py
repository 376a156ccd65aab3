"""
Публичная очередь подбора (in-memory, FIFO).
Первый ждущий становится caller'ом в новой комнате.
"""
import logging

from . import messages
from .registry import Connection
from .sessions import Session, SessionTable

logger = logging.getLogger(__name__)


class MatchmakingQueue:
    def __init__(self, sessions: SessionTable):
        self._sessions = sessions
        self._waiting: list[Connection] = []

    def __len__(self) -> int:
        return len(self._waiting)

    def __contains__(self, conn: Connection) -> bool:
        return any(p is conn for p in self._waiting)

    def prune(self) -> int:
        """Убрать из очереди мёртвые подключения. Возвращает сколько убрано."""
        before = len(self._waiting)
        self._waiting = [p for p in self._waiting if p.is_live]
        return before - len(self._waiting)

    def enqueue_public(self, conn: Connection, display_name: str) -> Session | None:
        """
        Поставить в очередь или сразу создать комнату с самым старым ждущим.
        Возвращает Session если пара найдена, иначе None.
        """
        conn.display_name = display_name
        self.prune()
        if conn in self:
            conn.send(messages.waiting())
            return None
        if self._waiting:
            opponent = self._waiting.pop(0)
            session = self._sessions.create(self._sessions.new_id(), opponent, is_private=False)
            self._sessions.join(session.id, conn)
            logger.info("Public match created: %s", session.id)
            return session
        self._waiting.append(conn)
        conn.send(messages.waiting())
        logger.info("Player added to matchmaking queue (conn %s)", conn.id)
        return None

    def dequeue(self, conn: Connection) -> bool:
        """Убрать из очереди. Возвращает True если был в очереди."""
        for i, p in enumerate(self._waiting):
            if p is conn:
                self._waiting.pop(i)
                logger.info("Player removed from matchmaking queue (conn %s)", conn.id)
                return True
        return False
