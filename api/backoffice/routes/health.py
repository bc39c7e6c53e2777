import os
import time

import psutil  # type: ignore[import-untyped]
from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint that monitors system resources and service status.

    Returns "initializing" until the service bundle is attached to the app.
    """
    cpu_percent = psutil.cpu_percent()
    memory = psutil.virtual_memory()

    services = getattr(request.app.state, "services", None)
    overall_status = "healthy" if services is not None else "initializing"

    # BUILD_ID is injected at image build time
    build_id = os.getenv("BUILD_ID", "unknown")

    return {
        "status": overall_status,
        "timestamp": int(time.time()),
        "build_id": build_id,
        "system": {
            "cpu_percent": cpu_percent,
            "memory_percent": memory.percent,
        },
        "services": {
            "handlers": len(services.registry) if services else 0,
            "sessions": len(services.session_store) if services else 0,
        },
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """
    Readiness probe that checks if the service is ready to handle requests.
    """
    if getattr(request.app.state, "services", None) is None:
        return {"status": "initializing"}
    return {"status": "ready"}


@router.get("/health/live")
async def liveness_check():
    """
    Liveness probe that checks if the service is running.
    """
    return {"status": "alive"}
