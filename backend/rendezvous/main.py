"""
Rendezvous API и WebSocket.
"""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse

from .broker import Broker
from .config import Config, get_config
from .reaper import run_periodically
from .ws_handlers import ws_loop

logger = logging.getLogger(__name__)

STATS_PAGE = """<html>
  <head><title>Game Stats</title></head>
  <body>
    <h1>Game Statistics</h1>
    <ul>
      <li>Active rooms: <span id="activeRooms">{activeRooms}</span></li>
      <li>Waiting players: <span id="waitingPlayers">{waitingPlayers}</span></li>
      <li>Total games played: <span id="totalGamesPlayed">{totalGamesPlayed}</span></li>
      <li>Total players joined: <span id="totalPlayersJoined">{totalPlayersJoined}</span></li>
    </ul>
    <script>
      async function updateStats() {{
        const res = await fetch('/stats.json');
        const data = await res.json();
        for (const key of Object.keys(data)) {{
          const el = document.getElementById(key);
          if (el) el.textContent = data[key];
        }}
      }}
      setInterval(updateStats, 5000);
    </script>
  </body>
</html>
"""


def setup_logging(config: Config) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(config: Config | None = None) -> FastAPI:
    config = config or get_config()
    broker = Broker(max_room_age_seconds=config.max_room_age_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        tasks = [
            asyncio.create_task(
                run_periodically(config.reap_interval_seconds, broker.reaper.sweep, "reaper")
            )
        ]
        if config.stats_log_interval_seconds > 0:
            tasks.append(asyncio.create_task(
                run_periodically(config.stats_log_interval_seconds, broker.log_stats, "stats")
            ))
        logger.info("Broker started")
        try:
            yield
        finally:
            broker.shutdown()
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("Broker stopped")

    app = FastAPI(title="Rendezvous Broker", lifespan=lifespan)
    app.state.broker = broker
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.force_https:
        @app.middleware("http")
        async def redirect_to_https(request: Request, call_next):
            if request.headers.get("x-forwarded-proto", "https") != "https":
                url = request.url.replace(scheme="https")
                return RedirectResponse(str(url), status_code=301)
            return await call_next(request)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/stats.json")
    def stats_json():
        return broker.stats()

    @app.get("/", response_class=HTMLResponse)
    @app.get("/stats", response_class=HTMLResponse)
    def stats_page():
        return STATS_PAGE.format(**broker.stats())

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        logger.info("WS: connection attempt from %s", ws.client)
        await ws_loop(ws, broker)

    @app.websocket("/")
    async def websocket_root(ws: WebSocket):
        await ws_loop(ws, broker)

    return app


setup_logging(get_config())
app = create_app()
