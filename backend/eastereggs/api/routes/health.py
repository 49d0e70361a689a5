"""Health & Readiness Probes: liveness plus readiness of the ledger and its store.

Invariants:
    - GET /health/ is 200 whenever the process is up
    - GET /health/ready is 503 until the EggService is installed, or while a
      configured database is unreachable; a database-less run is ready
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from eastereggs.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "eastereggs-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check(request: Request):
    checks: dict[str, str] = {}
    service = getattr(request.app.state, "egg_service", None)
    checks["ledger"] = service.state.value if service is not None else "not_initialized"

    if database.db_manager is None:
        checks["database"] = "not_configured"
    elif await database.db_manager.health_check():
        checks["database"] = "healthy"
    else:
        checks["database"] = "unavailable"

    ready = service is not None and checks["database"] != "unavailable"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ready" if ready else "not_ready", "checks": checks},
    )
