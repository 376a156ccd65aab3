"""Конфигурация брокера (переменные окружения)."""
import os
from dataclasses import dataclass, field
from functools import lru_cache


def _env_bool(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Config:
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    max_room_age_seconds: float = 24 * 60 * 60
    reap_interval_seconds: float = 60
    stats_log_interval_seconds: float = 300  # 0 — не логировать
    force_https: bool = False


@lru_cache
def get_config() -> Config:
    return Config(
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000")),
        debug=_env_bool("DEBUG"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        allowed_origins=os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        max_room_age_seconds=float(os.environ.get("MAX_ROOM_AGE_SECONDS", str(24 * 60 * 60))),
        reap_interval_seconds=float(os.environ.get("REAP_INTERVAL_SECONDS", "60")),
        stats_log_interval_seconds=float(os.environ.get("STATS_LOG_INTERVAL_SECONDS", "300")),
        force_https=_env_bool("FORCE_HTTPS"),
    )
