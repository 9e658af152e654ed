"""Health and readiness check routes."""

import time

from fastapi import APIRouter, Request

router = APIRouter()

SERVICE_NAME = "roblox-player-finder"


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Lightweight readiness check — no external calls."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "commit": request.app.state.settings.git_sha,
    }


@router.get("/health")
async def health() -> dict:
    return {"status": "ok", "service": SERVICE_NAME, "timestamp": int(time.time() * 1000)}
