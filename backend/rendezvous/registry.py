"""
Реестр подключений: транспорт и атрибуты каждого подключения.
Атрибуты (имя, комната, id запроса реванша) хранятся здесь, а не в транспорте.
"""
import itertools
import json
import logging
from typing import Any, Iterator, Protocol

from .constants import DEFAULT_DISPLAY_NAME

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Минимум, который ядру нужен от транспорта."""

    @property
    def is_live(self) -> bool: ...

    def send_text(self, text: str) -> None: ...

    def close(self) -> None: ...


class Connection:
    def __init__(self, conn_id: int, transport: Transport):
        self.id = conn_id
        self.transport = transport
        self.display_name = DEFAULT_DISPLAY_NAME
        self.session_id: str | None = None
        self.pending_request_id: Any = None

    def __repr__(self) -> str:
        return f"Connection(id={self.id}, name={self.display_name!r}, session={self.session_id})"

    @property
    def is_live(self) -> bool:
        return self.transport.is_live

    def send(self, payload: dict[str, Any]) -> bool:
        """Отправить JSON. Мёртвому подключению — молча ничего."""
        return self.send_raw(json.dumps(payload))

    def send_raw(self, text: str) -> bool:
        if not self.transport.is_live:
            return False
        try:
            self.transport.send_text(text)
            return True
        except Exception as e:
            logger.warning("send to conn %s failed: %s", self.id, e)
            return False


class ConnectionRegistry:
    def __init__(self):
        self._by_id: dict[int, Connection] = {}
        self._ids = itertools.count(1)
        self.total_joined = 0

    def register(self, transport: Transport) -> Connection:
        conn = Connection(next(self._ids), transport)
        self._by_id[conn.id] = conn
        self.total_joined += 1
        return conn

    def unregister(self, conn: Connection) -> None:
        self._by_id.pop(conn.id, None)

    def __contains__(self, conn: Connection) -> bool:
        return self._by_id.get(conn.id) is conn

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._by_id.values()))

    def __len__(self) -> int:
        return len(self._by_id)
