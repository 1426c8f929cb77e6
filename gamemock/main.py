"""FastAPI application for the game platform mock."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from gamemock.api.config_routes import router as config_router
from gamemock.api.simulation_routes import router as simulation_router
from gamemock.callback import close_callback_dispatcher, get_callback_dispatcher
from gamemock.config.loader import load_settings
from gamemock.config.store import get_config_store
from gamemock.errors import register_exception_handlers
from gamemock.health import router as health_router
from gamemock.logging_config import setup_logging_from_settings
from gamemock.middleware.request_logger import RequestLogMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    settings = load_settings()
    setup_logging_from_settings(settings)

    config = get_config_store().get()
    get_callback_dispatcher()

    logger.info(
        "gamemock_started",
        port=settings.listen_port,
        env=config.env,
        open_server_status=config.open_server_status,
        notify_status=config.notify_status,
        zonelist_status=config.zonelist_status,
    )

    yield

    dispatcher = get_callback_dispatcher()
    logger.info("gamemock_shutting_down", pending_callbacks=dispatcher.pending)
    await close_callback_dispatcher()
    logger.info("gamemock_stopped")


app = FastAPI(title="Game Platform Mock", lifespan=lifespan)

register_exception_handlers(app)
app.add_middleware(RequestLogMiddleware)

app.include_router(health_router)
app.include_router(config_router)
app.include_router(simulation_router)


@app.post("/api/panik")
async def panik():
    """Fail on purpose so harnesses can check that a crashing handler yields a 500."""
    raise RuntimeError("panik")
