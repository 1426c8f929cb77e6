"""Process-wide simulated configuration, replaced wholesale on edit."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from gamemock.config.loader import GameMockSettings, get_settings
from gamemock.errors import MalformedInput
from gamemock.models.config import MockConfiguration

logger = structlog.get_logger()

# Used when the defaults file is missing or empty
_BUILTIN_DEFAULTS: dict[str, Any] = {
    "open_server_status": 200,
    "open_server_status_sleep": 15,
    "open_server_callback_success": True,
    "open_server_callback_message": "whoops",
    "notify_status": 200,
    "notify_status_sleep": 15,
    "notify_callback_success": True,
    "notify_callback_message": "oops",
    "zonelist_status": 200,
    "zonelist_status_sleep": 15,
    "api_token": "valid_gamedemo_api_token",
}


def _load_yaml_defaults(path: Path) -> dict[str, Any]:
    """Load YAML config file, returning empty dict on failure."""
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def initial_configuration(settings: GameMockSettings) -> MockConfiguration:
    """Build the record in effect at startup. ``env`` always comes from settings."""
    values = _load_yaml_defaults(Path(settings.defaults_file))
    if not values:
        logger.warning("config_defaults_missing", path=settings.defaults_file)
        values = dict(_BUILTIN_DEFAULTS)
    values["env"] = settings.env
    # YAML scalars are already typed; lax mode tolerates e.g. quoted numbers
    return MockConfiguration.model_validate(values, strict=False)


class ConfigStore:
    """Holds exactly one MockConfiguration.

    Records are frozen, so a reader holding the result of ``get()`` keeps a
    consistent snapshot however many edits land afterwards. The lock only
    guards the reference swap.
    """

    def __init__(self, config: MockConfiguration) -> None:
        self._lock = threading.Lock()
        self._config = config

    def get(self) -> MockConfiguration:
        with self._lock:
            return self._config

    def set(self, raw: bytes | str) -> MockConfiguration:
        """Parse ``raw`` as a full configuration and replace the stored one.

        Raises MalformedInput and leaves the stored record untouched when
        ``raw`` is not a valid configuration object.
        """
        try:
            config = MockConfiguration.model_validate_json(raw)
        except ValidationError as exc:
            raise MalformedInput.from_validation_error(exc) from exc
        return self.replace(config)

    def replace(self, config: MockConfiguration) -> MockConfiguration:
        with self._lock:
            self._config = config
        return config


_store: ConfigStore | None = None
_store_lock = threading.Lock()


def get_config_store() -> ConfigStore:
    """Get or create the singleton store, seeded from the startup defaults."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = ConfigStore(initial_configuration(get_settings()))
    return _store


def reset_config_store() -> None:
    """Drop the singleton so the next access rebuilds it from defaults."""
    global _store
    with _store_lock:
        _store = None


def current_config() -> MockConfiguration:
    """Per-request snapshot dependency.

    FastAPI caches dependencies per request, so the auth gate and the
    handler behind it see the same record.
    """
    return get_config_store().get()
