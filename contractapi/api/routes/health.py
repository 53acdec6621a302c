"""Health & Readiness Probes - liveness and readiness endpoints.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is up
    - GET /api/v1/health/ready returns 503 until a chaincode is loaded, or when
      a store with a health check reports unhealthy
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe."""
    return {"status": "healthy", "service": "contractapi"}


@router.get("/ready")
def readiness_check(request: Request):
    """Readiness probe - chaincode loaded and store reachable."""
    chaincode = getattr(request.app.state, "chaincode", None)
    store = getattr(request.app.state, "store", None)
    if chaincode is None:
        return _not_ready("chaincode_not_loaded")
    check = getattr(store, "health_check", None)
    if store is None or (check is not None and not check()):
        return _not_ready("state_store_unavailable")
    return {
        "status": "ready",
        "checks": {"chaincode": "loaded", "state_store": "healthy"},
        "namespaces": list(chaincode.namespaces),
    }


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
