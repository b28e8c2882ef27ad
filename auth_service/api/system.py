"""System API: health check."""

from datetime import datetime, timezone

from fastapi import APIRouter

SERVICE_NAME = "auth-service"

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check():
    return {
        "service": SERVICE_NAME,
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
