"""Liveness, readiness and service info."""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.config import Settings, get_settings
from api.dependencies import get_dispatcher, get_inventory_store
from orderline.errors import StoreUnavailable
from orderline.services import EventDispatcher
from orderline.storage import SqliteInventoryStore

router = APIRouter()


def _now() -> str:
    return datetime.utcnow().isoformat() + "Z"


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """200 whenever the process is up."""
    return {"status": "ok", "timestamp": _now()}


@router.get("/health/ready")
async def readiness_check(
    settings: Settings = Depends(get_settings),
    store: SqliteInventoryStore = Depends(get_inventory_store),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
) -> Dict[str, Any]:
    """
    Report whether orders can be taken right now.

    "ready" needs a reachable database and a LINE access token. Speech
    credentials are informational: application default credentials may apply.
    """
    try:
        store.ping()
        database = {"status": "ok"}
    except StoreUnavailable as e:
        database = {"status": "error", "message": e.message}

    checks = {
        "database": database,
        "line": {"status": "configured" if settings.line_channel_access_token else "not_configured"},
        "speech": {
            "status": "configured" if settings.google_application_credentials else "default_credentials"
        },
    }
    ready = database["status"] == "ok" and checks["line"]["status"] == "configured"

    return {
        "status": "ready" if ready else "degraded",
        "timestamp": _now(),
        "version": settings.app_version,
        "pending_tasks": dispatcher.pending,
        "checks": checks,
    }


@router.get("/health/info")
async def service_info(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": "development" if settings.debug else "production",
    }
