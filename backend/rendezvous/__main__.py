"""
Запуск: python -m rendezvous
По SIGTERM/SIGINT сначала рассылаем serverShutdown, потом uvicorn закрывает сокеты.
"""
import logging

import uvicorn

from .config import get_config
from .main import app

logger = logging.getLogger(__name__)


class BrokerServer(uvicorn.Server):
    def handle_exit(self, sig, frame) -> None:
        logger.info("Signal %s received, shutting down gracefully...", sig)
        app.state.broker.shutdown()
        super().handle_exit(sig, frame)


def main() -> None:
    config = get_config()
    server = BrokerServer(uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    ))
    server.run()


if __name__ == "__main__":
    main()
