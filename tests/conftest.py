"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

DEFAULT_TOKEN = "valid_gamedemo_api_token"


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch):
    """Provide default settings and a fresh store/dispatcher for every test."""
    monkeypatch.delenv("env", raising=False)
    monkeypatch.delenv("GAMEMOCK_ENV", raising=False)
    monkeypatch.delenv("GAMEMOCK_EXPOSE_EXPECTED_TOKEN", raising=False)
    monkeypatch.setenv("GAMEMOCK_LOG_JSON", "false")
    monkeypatch.setenv("GAMEMOCK_LOG_LEVEL", "debug")

    import gamemock.callback as callback
    import gamemock.config.loader as loader
    import gamemock.config.store as store

    loader._settings = None
    store.reset_config_store()
    callback._dispatcher = None
    yield
    loader._settings = None
    store.reset_config_store()
    callback._dispatcher = None


@pytest.fixture
def client():
    """Create a FastAPI test client (runs the lifespan)."""
    from gamemock.main import app

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def auth_headers():
    """Headers carrying the default api_token, verbatim."""
    return {"Authorization": DEFAULT_TOKEN}


@pytest.fixture
def mock_deliver():
    """Replace callback delivery so nothing leaves the process.

    ``submit`` still creates the detached task; the mock records the call
    as soon as the task's coroutine is built.
    """
    from gamemock.callback import CallbackDispatcher

    with patch.object(CallbackDispatcher, "deliver", new_callable=AsyncMock) as deliver:
        yield deliver


@pytest.fixture
def no_latency():
    """Skip simulated sleeps while recording the requested duration."""
    with patch("gamemock.api.simulation_routes._simulate_latency", new_callable=AsyncMock) as sleep:
        yield sleep


def _full_config(**overrides) -> dict:
    body = {
        "open_server_status": 200,
        "open_server_status_sleep": 0,
        "open_server_callback_success": True,
        "open_server_callback_message": "whoops",
        "notify_status": 200,
        "notify_status_sleep": 0,
        "notify_callback_success": True,
        "notify_callback_message": "oops",
        "zonelist_status": 200,
        "zonelist_status_sleep": 0,
        "api_token": DEFAULT_TOKEN,
        "env": "",
    }
    body.update(overrides)
    return body


@pytest.fixture
def config_body():
    """Factory for complete configuration bodies with zero sleeps."""
    return _full_config
