"""Health & Readiness Probes — liveness and readiness for the container platform.

Invariants:
    - GET /health/ answers 200 while the process is up, without touching storage
    - GET /health/ready answers 200 only when the database answers AND the
      operation types are seeded; transactions cannot be created otherwise
    - A failing readiness probe answers 503 with the first failing reason
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from ledger.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


def _not_ready(reason: str) -> JSONResponse:
    logger.warning("Readiness check failed", extra={"operation": reason})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", "service": get_settings().service_name}


@router.get("/ready")
async def readiness(request: Request):
    """Database reachable and schema migrated."""
    db_manager = getattr(request.app.state, "db_manager", None)
    if db_manager is None or not await db_manager.health_check():
        return _not_ready("database_unavailable")

    operation_types = await db_manager.count_operation_types()
    if not operation_types:
        return _not_ready("operation_types_not_seeded")

    return {
        "status": "ready",
        "checks": {"database": "healthy", "operation_types": operation_types},
    }
