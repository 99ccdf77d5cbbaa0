"""Health check endpoints for liveness and readiness probes."""

from fastapi import APIRouter, Depends
from ..crud import MemStorage
from ..dependencies.store import get_storage

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Liveness probe.
    Returns 200 OK if the service is running.
    """
    return {"status": "healthy", "service": "taskboard"}


@router.get("/ready")
async def readiness_check(storage: MemStorage = Depends(get_storage)):
    """
    Readiness probe.
    Returns 200 OK once the store has been initialized.
    """
    return {"status": "ready", "service": "taskboard", "users": len(storage.user_ids())}
