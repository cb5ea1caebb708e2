"""Health check endpoint."""

import time
from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from jobboard.models.responses import HealthResponse, HealthDependency

router = APIRouter()

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """System health check with dependency status."""
    dependencies = {}

    # Check database
    try:
        repository = request.app.state.repository
        start = time.time()
        await run_in_threadpool(repository.ping)
        latency = (time.time() - start) * 1000
        dependencies["database"] = HealthDependency(status="healthy", latency_ms=round(latency, 2))
    except Exception as e:
        dependencies["database"] = HealthDependency(status="unhealthy", message=str(e))

    all_healthy = all(d.status == "healthy" for d in dependencies.values())

    return HealthResponse(
        status="healthy" if all_healthy else "unhealthy",
        uptime_seconds=round(time.time() - _start_time, 2),
        dependencies=dependencies,
    )
