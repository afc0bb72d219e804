"""
Liveness and readiness endpoints
Neither probe checks dependencies; the sidecar has its own health checks
"""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health/live")
def liveness_check():
    return {"status": "UP"}


@router.get("/health/ready")
def readiness_check():
    return {"status": "UP"}
