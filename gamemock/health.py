"""Liveness endpoint."""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter()


@router.get("/ping")
async def ping():
    """Liveness check. No auth, no config reads."""
    return {"message": "pong"}
