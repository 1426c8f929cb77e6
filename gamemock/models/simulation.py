"""Request and payload models for the simulated open-server / notify flow."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class SimulationRequest(BaseModel):
    """Body of ``POST /api/server`` and ``POST /api/notify``."""

    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)

    action_id: str = Field("", alias="actionId")
    server_users: int = Field(0, alias="serverUsers")
    server_id: int = Field(0, alias="serverId")
    new_server_names: list[str] = Field(default_factory=list, alias="newServerNames")
    callback_token: str = Field("", alias="callbackToken")

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        """A JSON null reads the same as a missing field."""
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v


class CallbackPayload(BaseModel):
    """Body POSTed to the platform's callback URL once an accepted operation completes."""

    model_config = ConfigDict(populate_by_name=True)

    app_id: str = Field(..., alias="appId")
    callback_token: str = Field(..., alias="callbackToken")
    action_id: str = Field(..., alias="actionId")
    success: bool
    message: str


class SimulatedResponse(BaseModel):
    """Body of every simulated-response handler."""

    message: str = "ok"
    status: int
