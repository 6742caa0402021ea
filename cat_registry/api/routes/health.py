from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends

from cat_registry.api.deps import get_database
from cat_registry.core.config import get_settings
from cat_registry.infrastructure.db import Database

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


@router.get("/health", summary="Service health probe")
async def health_check(database: Database = Depends(get_database)) -> dict:  # noqa: B008
    """Return basic service and datastore status information."""
    settings = get_settings()
    database_status = await database.ping()

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": "ok" if database_status.get("status") == "ok" else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {"database": database_status},
    }
    logger.info("health_probe", **payload)
    return payload
