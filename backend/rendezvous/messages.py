"""
Типы входящих сообщений и сборка исходящих payload'ов.
"""
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class InboundType(str, Enum):
    JOIN_PUBLIC = "joinPublic"
    LEAVE_PUBLIC = "leavePublic"
    CREATE_PRIVATE = "createPrivate"
    JOIN_PRIVATE = "joinPrivate"
    OFFER = "offer"
    ANSWER = "answer"
    ICE = "ice"
    READY_FOR_NEW_GAME = "readyForNewGame"


# Сигнальные сообщения пересылаются как есть
RELAY_TYPES = frozenset({InboundType.OFFER, InboundType.ANSWER, InboundType.ICE})


@dataclass(frozen=True)
class Inbound:
    kind: InboundType
    data: dict[str, Any]
    raw: str

    @property
    def room_id(self) -> Any:
        return self.data.get("roomId")

    @property
    def display_name(self) -> Any:
        return self.data.get("displayName")


def parse_inbound(raw: str | bytes) -> Inbound | None:
    """
    Разобрать сырое сообщение клиента.
    None — если это не JSON-объект или тип неизвестен.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning("invalid utf-8 payload: %s", e)
            return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("invalid JSON received: %s", e)
        return None
    if not isinstance(data, dict):
        logger.warning("non-object JSON received: %r", raw[:100])
        return None
    t = data.get("type")
    try:
        kind = InboundType(t)
    except ValueError:
        logger.warning("unknown message type: %r", t)
        return None
    return Inbound(kind=kind, data=data, raw=raw)


def waiting() -> dict[str, Any]:
    return {"type": "waiting"}


def match_found(room_id: str, is_caller: bool, opponent_name: str) -> dict[str, Any]:
    return {
        "type": "matchFound",
        "roomId": room_id,
        "isCaller": is_caller,
        "opponentName": opponent_name,
    }


def room_invalid(room_id: Any) -> dict[str, Any]:
    return {"type": "roomInvalid", "roomId": room_id}


def room_full(room_id: Any) -> dict[str, Any]:
    return {"type": "roomFull", "roomId": room_id}


def error(message: str) -> dict[str, Any]:
    return {"type": "error", "message": message}


def opponent_disconnected() -> dict[str, Any]:
    return {"type": "opponentDisconnected"}


def opponent_requested_new_game(req_id: Any) -> dict[str, Any]:
    return {"type": "opponentRequestedNewGame", "reqId": req_id}


def start_new_game(req_id: Any) -> dict[str, Any]:
    return {"type": "startNewGame", "reqId": req_id}


def server_shutdown() -> dict[str, Any]:
    return {"type": "serverShutdown"}
