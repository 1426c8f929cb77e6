"""Static token authentication for the simulated platform routes."""

from __future__ import annotations

from fastapi import Depends, Security
from fastapi.security import APIKeyHeader

from gamemock.config.loader import get_settings
from gamemock.config.store import current_config
from gamemock.errors import Unauthorized
from gamemock.models.config import MockConfiguration

_api_token_header = APIKeyHeader(name="Authorization", auto_error=False)


async def require_api_token(
    token: str | None = Security(_api_token_header),
    config: MockConfiguration = Depends(current_config),
) -> str:
    """Validate the Authorization header against the configured ``api_token``.

    The header is compared verbatim: no scheme parsing, no trimming. A
    missing header counts as an empty token.
    """
    token = token or ""
    if token != config.api_token:
        if get_settings().expose_expected_token:
            message = f"expected authorization token to be {config.api_token} got {token}"
        else:
            message = f"invalid authorization token {token!r}"
        raise Unauthorized(message)
    return token
