"""Simulated platform endpoints: status, latency and callbacks all come from the config store."""

from __future__ import annotations

import asyncio

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.background import BackgroundTask

from gamemock.api.auth import require_api_token
from gamemock.callback import CallbackDispatcher, CallbackKind, get_callback_dispatcher
from gamemock.config.loader import get_settings
from gamemock.config.store import current_config
from gamemock.errors import MalformedInput
from gamemock.models.config import MockConfiguration
from gamemock.models.simulation import CallbackPayload, SimulatedResponse, SimulationRequest

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["simulation"], dependencies=[Depends(require_api_token)])

HTTP_ACCEPTED = 202
_NO_BODY_STATUSES = frozenset({204, 304})


async def _simulate_latency(seconds: int) -> None:
    """Suspend this request only; other requests keep being served."""
    if seconds > 0:
        await asyncio.sleep(seconds)


async def _parse_request(request: Request) -> SimulationRequest:
    body = await request.body()
    try:
        return SimulationRequest.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedInput.from_validation_error(exc) from exc


def _simulated_response(status: int, background: BackgroundTask | None = None) -> Response:
    if not 100 <= status <= 599:
        raise ValueError(f"configured status {status} is not a valid HTTP status code")
    if status < 200 or status in _NO_BODY_STATUSES:
        return Response(status_code=status, background=background)
    return JSONResponse(
        status_code=status,
        content=SimulatedResponse(status=status).model_dump(),
        background=background,
    )


async def _accept_and_call_back(
    kind: CallbackKind,
    body: SimulationRequest,
    config: MockConfiguration,
    dispatcher: CallbackDispatcher,
    status: int,
    sleep: int,
    success: bool,
    message: str,
) -> Response:
    """Shared open-server / notify flow: sleep, respond, then maybe call back."""
    await _simulate_latency(sleep)

    background = None
    if status == HTTP_ACCEPTED:
        payload = CallbackPayload(
            app_id=get_settings().app_id,
            callback_token=body.callback_token,
            action_id=body.action_id,
            success=success,
            message=message,
        )
        # Runs once the response has been sent
        background = BackgroundTask(dispatcher.submit, kind, payload, config.env)

    logger.info(
        "simulated_response",
        operation=kind.value,
        status=status,
        slept=sleep,
        action_id=body.action_id,
        callback=background is not None,
    )
    return _simulated_response(status, background)


@router.post("/server")
async def open_server(
    request: Request,
    config: MockConfiguration = Depends(current_config),
    dispatcher: CallbackDispatcher = Depends(get_callback_dispatcher),
):
    """Simulate opening a game server."""
    body = await _parse_request(request)
    return await _accept_and_call_back(
        CallbackKind.OPEN_SERVER,
        body,
        config,
        dispatcher,
        status=config.open_server_status,
        sleep=config.open_server_status_sleep,
        success=config.open_server_callback_success,
        message=config.open_server_callback_message,
    )


@router.post("/notify")
async def notify(
    request: Request,
    config: MockConfiguration = Depends(current_config),
    dispatcher: CallbackDispatcher = Depends(get_callback_dispatcher),
):
    """Simulate a new-server notification."""
    body = await _parse_request(request)
    return await _accept_and_call_back(
        CallbackKind.NOTIFY,
        body,
        config,
        dispatcher,
        status=config.notify_status,
        sleep=config.notify_status_sleep,
        success=config.notify_callback_success,
        message=config.notify_callback_message,
    )


@router.get("/zonelist")
async def zonelist(config: MockConfiguration = Depends(current_config)):
    """Simulate the zone list. Never calls back."""
    await _simulate_latency(config.zonelist_status_sleep)
    logger.info("simulated_response", operation="zonelist", status=config.zonelist_status)
    return _simulated_response(config.zonelist_status)
