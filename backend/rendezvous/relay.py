"""Пересылка сигнальных сообщений (offer/answer/ice) сопернику."""
import logging

from .registry import Connection
from .sessions import SessionTable

logger = logging.getLogger(__name__)


def relay(sessions: SessionTable, sender: Connection, room_id: object, raw: str) -> bool:
    """
    Переслать raw второму участнику комнаты без изменений.
    Если комнаты нет, отправитель не участник или соперник мёртв — молча отбросить.
    """
    session = sessions.get(room_id if room_id is not None else sender.session_id)
    if session is None or session.slot_of(sender) is None:
        logger.debug("relay from conn %s dropped: no room %r", sender.id, room_id)
        return False
    opponent = session.opponent_of(sender)
    if opponent is None or not opponent.is_live:
        return False
    return opponent.send_raw(raw)
