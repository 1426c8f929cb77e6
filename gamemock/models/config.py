"""Pydantic model for the simulated configuration record."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class MockConfiguration(BaseModel):
    """Runtime-adjustable behavior of the simulated endpoints.

    Missing or null fields take zero values and unknown fields are dropped, so a
    partial body replaces the record rather than patching it. Types are
    strict: ``"200"`` is not a status and ``1`` is not a boolean.
    """

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    open_server_status: int = 0
    open_server_status_sleep: int = Field(0, ge=0)
    open_server_callback_success: bool = False
    open_server_callback_message: str = ""

    notify_status: int = 0
    notify_status_sleep: int = Field(0, ge=0)
    notify_callback_success: bool = False
    notify_callback_message: str = ""

    zonelist_status: int = 0
    zonelist_status_sleep: int = Field(0, ge=0)

    api_token: str = ""
    env: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v
