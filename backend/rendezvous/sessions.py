"""
Таблица сессий (комнат) в памяти.
В комнате не больше двух участников; первый — caller.
"""
import logging
import secrets
import time
from dataclasses import dataclass, field

from . import messages
from .constants import (
    DEFAULT_OPPONENT_NAME,
    GENERATED_ID_ALPHABET,
    GENERATED_ID_LEN,
    MAX_PARTICIPANTS,
    ROOM_ID_RE,
)
from .errors import InvalidRoomId, RoomFull, RoomIdInUse, RoomNotFound
from .registry import Connection

logger = logging.getLogger(__name__)


def is_valid_room_id(room_id: object) -> bool:
    return isinstance(room_id, str) and ROOM_ID_RE.match(room_id) is not None


def generate_room_id() -> str:
    return "".join(secrets.choice(GENERATED_ID_ALPHABET) for _ in range(GENERATED_ID_LEN))


@dataclass
class Session:
    id: str
    participants: list[Connection] = field(default_factory=list)
    is_private: bool = False
    created_at: float = field(default_factory=time.monotonic)
    ready: list[bool] = field(default_factory=lambda: [False, False])

    @property
    def is_full(self) -> bool:
        return len(self.participants) >= MAX_PARTICIPANTS

    def slot_of(self, conn: Connection) -> int | None:
        for i, p in enumerate(self.participants):
            if p is conn:
                return i
        return None

    def opponent_of(self, conn: Connection) -> Connection | None:
        for p in self.participants:
            if p is not conn:
                return p
        return None

    def has_live_participant(self) -> bool:
        return any(p.is_live for p in self.participants)


class SessionTable:
    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get(self, session_id: object) -> Session | None:
        if not isinstance(session_id, str):
            return None
        return self._sessions.get(session_id)

    def all(self) -> list[Session]:
        return list(self._sessions.values())

    def new_id(self) -> str:
        while True:
            session_id = generate_room_id()
            if session_id not in self._sessions:
                return session_id

    def create(self, session_id: str, creator: Connection, is_private: bool = False) -> Session:
        if session_id in self._sessions:
            raise RoomIdInUse(session_id)
        session = Session(id=session_id, participants=[creator], is_private=is_private)
        self._sessions[session_id] = session
        creator.session_id = session_id
        creator.pending_request_id = None
        logger.info("Room created: %s (private=%s)", session_id, is_private)
        return session

    def create_private(self, session_id: object, creator: Connection) -> Session:
        if not is_valid_room_id(session_id):
            raise InvalidRoomId(session_id)
        session = self.create(session_id, creator, is_private=True)
        creator.send(messages.waiting())
        return session

    def join(self, session_id: str, conn: Connection) -> Session:
        """Добавить второго участника и объявить обоим matchFound."""
        session = self._sessions.get(session_id)
        if session is None:
            raise RoomNotFound(session_id)
        if session.is_full:
            raise RoomFull(session_id)
        session.participants.append(conn)
        conn.session_id = session_id
        conn.pending_request_id = None
        logger.info(
            "Player joined room %s: %s",
            session_id,
            " vs ".join(p.display_name for p in session.participants),
        )
        for index, player in enumerate(session.participants):
            other = session.opponent_of(player)
            player.send(messages.match_found(
                session_id,
                is_caller=index == 0,
                opponent_name=(other.display_name if other else None) or DEFAULT_OPPONENT_NAME,
            ))
        return session

    def join_private(self, session_id: object, conn: Connection) -> Session:
        if not is_valid_room_id(session_id):
            raise InvalidRoomId(session_id)
        return self.join(session_id, conn)

    def remove(self, session_id: str) -> bool:
        """Удалить комнату. Повторный вызов — no-op, возвращает False."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        for p in session.participants:
            if p.session_id == session_id:
                p.session_id = None
                p.pending_request_id = None
        logger.info("Room removed: %s", session_id)
        return True

    def handle_disconnect(self, conn: Connection) -> None:
        """Участник ушёл: уведомить живого соперника и закрыть комнату."""
        session_id = conn.session_id
        if not session_id:
            return
        session = self._sessions.get(session_id)
        if session is None or session.slot_of(conn) is None:
            conn.session_id = None
            return
        opponent = session.opponent_of(conn)
        if opponent is not None and opponent.is_live:
            opponent.send(messages.opponent_disconnected())
        self.remove(session_id)
