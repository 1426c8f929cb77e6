"""Env var config loading with pydantic-settings."""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()

_DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


class GameMockSettings(BaseSettings):
    """Process settings, fixed for the lifetime of the server.

    The simulated configuration (statuses, sleeps, callback fields) is not
    here: it lives in the config store and is edited over HTTP.
    """

    model_config = SettingsConfigDict(
        env_prefix="GAMEMOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    listen_host: str = "0.0.0.0"
    listen_port: int = 8080
    log_level: str = "info"
    log_json: bool = True

    # Deployments set a bare `env` variable; "prod" selects production callbacks
    env: str = Field("", validation_alias=AliasChoices("GAMEMOCK_ENV", "env"))

    app_id: str = "gamedemo"
    defaults_file: str = str(_DEFAULTS_PATH)

    # Callback delivery
    callback_prod_base_url: str = "https://game-cloud.g123.jp"
    callback_staging_base_url: str = "https://game-cloud.stg.g123.jp"
    callback_timeout: float = 10.0

    # Include the expected token in 401 messages (parity with the real platform's test double)
    expose_expected_token: bool = False


_settings: GameMockSettings | None = None


def get_settings() -> GameMockSettings:
    """Get or create the singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def load_settings() -> GameMockSettings:
    """Load settings from env vars (env vars override model defaults)."""
    global _settings
    _settings = GameMockSettings()
    logger.info("config_loaded", env=_settings.env, port=_settings.listen_port)
    return _settings

