"""Callback dispatcher: fire-and-forget delivery to the game platform's callback endpoints."""

from __future__ import annotations

import asyncio
import json
from enum import Enum

import httpx
import structlog

from gamemock.config.loader import GameMockSettings, get_settings
from gamemock.errors import CallbackDeliveryFailure
from gamemock.models.simulation import CallbackPayload

logger = structlog.get_logger()

_MAX_PENDING_CALLBACKS = 500

_OPEN_SERVER_PROD_PATH = "/cp/api/v1/new_server/callback"
_OPEN_SERVER_STAGING_PATH = "/cp/api/v1/open_server/callback"
_NOTIFY_PATH = "/cp/api/v1/new_server/callback"


class CallbackKind(str, Enum):
    OPEN_SERVER = "open_server"
    NOTIFY = "notify"


def callback_url(kind: CallbackKind, env: str, settings: GameMockSettings) -> str:
    """Resolve the callback URL for an operation. Only ``env == "prod"`` selects production."""
    if env == "prod":
        base = settings.callback_prod_base_url
        path = _OPEN_SERVER_PROD_PATH if kind is CallbackKind.OPEN_SERVER else _NOTIFY_PATH
    else:
        base = settings.callback_staging_base_url
        path = _OPEN_SERVER_STAGING_PATH if kind is CallbackKind.OPEN_SERVER else _NOTIFY_PATH
    return f"{base.rstrip('/')}{path}"


class CallbackDispatcher:
    """Deliver callbacks at most once, detached from the request that triggered them.

    Each delivery runs as its own asyncio task. Failures are logged and
    dropped: there is no retry and no delivery confirmation.
    """

    def __init__(self, settings: GameMockSettings | None = None) -> None:
        self._settings = settings or get_settings()
        self._client: httpx.AsyncClient | None = None
        self._pending: set[asyncio.Task] = set()

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy-init a shared httpx client for callback delivery."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.callback_timeout),
                follow_redirects=False,
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=5),
            )
        return self._client

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def submit(self, kind: CallbackKind, payload: CallbackPayload, env: str) -> asyncio.Task | None:
        """Schedule delivery and return immediately. The caller never awaits the result."""
        if len(self._pending) >= _MAX_PENDING_CALLBACKS:
            logger.warning("callback_queue_full", kind=kind.value, action_id=payload.action_id, dropped=True)
            return None

        task = asyncio.create_task(self.deliver(kind, payload, env))

        def _done(t: asyncio.Task) -> None:
            self._pending.discard(t)
            if t.done() and not t.cancelled():
                exc = t.exception()
                if exc:
                    logger.error("callback_task_exception", error=str(exc))

        task.add_done_callback(_done)
        self._pending.add(task)
        return task

    async def deliver(self, kind: CallbackKind, payload: CallbackPayload, env: str) -> None:
        """POST one callback. Catches all delivery errors, never raises."""
        url = callback_url(kind, env, self._settings)
        try:
            status_code = await self._send(url, payload)
        except CallbackDeliveryFailure as exc:
            logger.error(
                "callback_dispatch_failed",
                kind=kind.value,
                url=url,
                action_id=payload.action_id,
                error=exc.message,
            )
            return
        logger.info(
            "callback_dispatched",
            kind=kind.value,
            url=url,
            action_id=payload.action_id,
            status=status_code,
        )

    async def _send(self, url: str, payload: CallbackPayload) -> int:
        try:
            body = json.dumps(payload.model_dump(by_alias=True)).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise CallbackDeliveryFailure(f"error when marshalling callback body: {exc}") from exc

        try:
            resp = await self._get_client().post(
                url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise CallbackDeliveryFailure(f"error when sending callback: {exc!r}") from exc
        return resp.status_code

    async def drain(self) -> None:
        """Wait for in-flight deliveries to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Cancel pending deliveries and close the shared httpx client."""
        for t in list(self._pending):
            if not t.done():
                t.cancel()
        self._pending.clear()
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_dispatcher: CallbackDispatcher | None = None


def get_callback_dispatcher() -> CallbackDispatcher:
    """Get or create the singleton dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = CallbackDispatcher()
    return _dispatcher


async def close_callback_dispatcher() -> None:
    """Close and drop the singleton dispatcher."""
    global _dispatcher
    if _dispatcher is not None:
        await _dispatcher.close()
        _dispatcher = None
