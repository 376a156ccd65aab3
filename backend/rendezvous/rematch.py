"""
Реванш: двухфазное «готов» в рамках одной комнаты.
Idle -> OneReady -> (оба готовы) -> startNewGame и снова Idle.
"""
import logging

from . import messages
from .registry import Connection
from .sessions import SessionTable, generate_room_id

logger = logging.getLogger(__name__)


class RematchCoordinator:
    def __init__(self, sessions: SessionTable):
        self._sessions = sessions
        self.completed_games = 0

    def request_rematch(self, conn: Connection, room_id: object = None, request_id: object = None) -> bool:
        """
        Отметить участника готовым. Возвращает True, если раунд завершён.
        Запросы вне полной комнаты (или с чужим room_id) игнорируются.
        """
        session = self._sessions.get(room_id if room_id is not None else conn.session_id)
        if session is None or not session.is_full:
            return False
        slot = session.slot_of(conn)
        if slot is None:
            return False
        if session.ready[slot]:
            logger.debug("conn %s already ready in room %s", conn.id, session.id)
            return False
        req_id = request_id if request_id not in (None, "") else generate_room_id()
        session.ready[slot] = True
        conn.pending_request_id = req_id
        opponent = session.opponent_of(conn)
        if all(session.ready):
            logger.info("Both players ready for new game in room %s", session.id)
            session.ready = [False, False]
            self.completed_games += 1
            for p in session.participants:
                p.pending_request_id = None
                p.send(messages.start_new_game(req_id))
            return True
        if opponent is not None:
            opponent.send(messages.opponent_requested_new_game(req_id))
            logger.info("New game request sent in room %s", session.id)
        return False
