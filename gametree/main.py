from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gametree import __version__
from gametree.config import CORS_ORIGINS, IS_PRODUCTION, LOAD_SAMPLE_GAMES
from gametree.core.samples import load_sample_games
from gametree.dependencies import get_game_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


class _HealthCheckFilter(logging.Filter):
    """Suppress successful health-check entries from uvicorn access log."""

    def filter(self, record: logging.LogRecord) -> bool:
        # uvicorn access log args: (client_addr, method, path, http_version, status_code)
        args = record.args
        if not isinstance(args, tuple) or len(args) < 5:
            return True
        path, status = args[2], args[4]
        return not (isinstance(path, str) and path.endswith("/health") and status == 200)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize app state on startup."""
    logging.getLogger("uvicorn.access").addFilter(_HealthCheckFilter())
    logger.info("Starting game tree service...")
    store = get_game_store()
    if LOAD_SAMPLE_GAMES:
        load_sample_games(store)
    logger.info("Server ready. %d games loaded.", len(store))
    yield


app = FastAPI(title="Game Tree Editor", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers (imported after app initialization to avoid circular imports)
from gametree.routes.edit import router as edit_router  # noqa: E402
from gametree.routes.games import router as games_router  # noqa: E402
from gametree.routes.strategic import router as strategic_router  # noqa: E402

app.include_router(games_router)
app.include_router(edit_router)
app.include_router(strategic_router)


@app.get("/api/health")
def health_check() -> dict:
    return {"status": "ok", "games_loaded": len(get_game_store())}


if not IS_PRODUCTION:

    @app.post("/api/reset")
    def reset_state() -> dict:
        """Reset all state - clear all games and reload the samples."""
        store = get_game_store()
        count = len(store)
        store.clear()
        load_sample_games(store)
        logger.info("Reset state. Cleared %d games, restored %d samples.", count, len(store))
        return {"status": "reset", "games_cleared": count}
