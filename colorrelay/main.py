"""FastAPI app factory: relay state, liveness monitor lifecycle, routers, static UI.

Serve with ``python -m colorrelay`` or ``uvicorn --factory colorrelay.main:create_app``.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings
from .routers import colors, health
from .state import RelayState

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(message)s", datefmt="%H:%M:%S")
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    relay: RelayState = app.state.relay
    relay.monitor.start()
    try:
        yield
    finally:
        await relay.monitor.stop()
        closed = await relay.registry.close_all()
        logger.info("WebSocket server closed (%d clients disconnected)", closed)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    app = FastAPI(title="Color relay", lifespan=lifespan)
    app.state.relay = RelayState.from_settings(settings)

    app.include_router(health.router)
    app.include_router(colors.router)

    static_dir = settings.static_dir
    static_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    @app.get("/")
    async def index():
        """Serve the color UI."""
        index_path = static_dir / "index.html"
        if not index_path.exists():
            return {"message": "Put index.html in the static/ directory"}
        return FileResponse(index_path)

    return app

