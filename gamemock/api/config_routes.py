"""Read and replace the simulated configuration."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request

from gamemock.config.store import ConfigStore, get_config_store
from gamemock.models.config import MockConfiguration

logger = structlog.get_logger()

router = APIRouter(prefix="/api/config", tags=["config"])


@router.get("", response_model=MockConfiguration)
async def get_config(store: ConfigStore = Depends(get_config_store)):
    """Return the configuration currently in effect."""
    return store.get()


@router.post("", response_model=MockConfiguration)
async def edit_config(request: Request, store: ConfigStore = Depends(get_config_store)):
    """Replace the whole configuration. Fields left out are reset to zero values."""
    body = await request.body()
    config = store.set(body)
    logger.info(
        "config_replaced",
        open_server_status=config.open_server_status,
        notify_status=config.notify_status,
        zonelist_status=config.zonelist_status,
        env=config.env,
    )
    return config
