"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter, Depends

from src.catalog.api.http.deps import get_database_service
from src.catalog.core.services import DbSessionService
from src.catalog.runtime.context import get_config

router = APIRouter(tags=["health"])


@router.get("/health")
def health(
    database_service: DbSessionService = Depends(get_database_service),
) -> dict[str, Any]:
    """Liveness probe that also reports store connectivity.

    Always answers 200; an unreachable database is reported as
    ``disconnected`` and the next request reconnects.
    """
    healthy = database_service.health_check()
    database: dict[str, Any] = {
        "status": "connected" if healthy else "disconnected",
        "type": database_service.dialect,
    }
    if healthy:
        database["pool"] = database_service.get_pool_status()

    return {
        "status": "ok",
        "database": database,
        "environment": get_config().app.environment,
    }
