"""
Периодическая чистка комнат: без живых участников или старше max_age.
"""
import asyncio
import logging
import time
from typing import Callable

from .sessions import SessionTable

logger = logging.getLogger(__name__)


class Reaper:
    def __init__(self, sessions: SessionTable, max_age_seconds: float = 24 * 60 * 60):
        self._sessions = sessions
        self.max_age_seconds = max_age_seconds

    def sweep(self, now: float | None = None) -> list[str]:
        """Удалить протухшие комнаты. Возвращает их id."""
        if now is None:
            now = time.monotonic()
        removed = []
        for session in self._sessions.all():
            expired = now - session.created_at > self.max_age_seconds
            if expired or not session.has_live_participant():
                logger.info("Cleaning up stale room: %s (expired=%s)", session.id, expired)
                if self._sessions.remove(session.id):
                    removed.append(session.id)
        return removed


async def run_periodically(interval: float, fn: Callable[[], object], name: str) -> None:
    """Вызывать fn каждые interval секунд до отмены задачи."""
    logger.info("%s: every %ss", name, interval)
    while True:
        await asyncio.sleep(interval)
        try:
            fn()
        except Exception:
            logger.exception("%s failed", name)
