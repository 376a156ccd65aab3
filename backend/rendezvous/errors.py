"""
Ошибки таблицы сессий, видимые клиенту.
Каждая ошибка знает, каким сообщением её отправить нарушителю.
"""
from typing import Any

from . import messages


class BrokerError(Exception):
    """Нефатальная ошибка запроса; сообщается только отправителю."""

    def __init__(self, room_id: str | None = None):
        super().__init__(room_id)
        self.room_id = room_id

    def to_message(self) -> dict[str, Any]:
        raise NotImplementedError


class InvalidRoomId(BrokerError):
    def to_message(self) -> dict[str, Any]:
        return messages.error("Invalid room ID format")


class RoomIdInUse(BrokerError):
    def to_message(self) -> dict[str, Any]:
        return messages.error("Room ID already exists")


class RoomNotFound(BrokerError):
    def to_message(self) -> dict[str, Any]:
        return messages.room_invalid(self.room_id)


class RoomFull(BrokerError):
    def to_message(self) -> dict[str, Any]:
        return messages.room_full(self.room_id)
