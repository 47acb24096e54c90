from __future__ import annotations

from fastapi import APIRouter, Request

from zoneworld.config import APP_VERSION

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Health check endpoint with system status."""
    state = request.app.state
    return {
        "status": "ok",
        "environment": state.settings.environment,
        "migration_enabled": state.settings.migration_enabled,
        "migration_running": state.scheduler.running,
        "subscribers": state.broadcaster.subscriber_count,
        "version": APP_VERSION,
    }
