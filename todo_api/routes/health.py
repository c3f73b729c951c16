"""
Todo API — Health Check Route
==============================

What:  Liveness endpoint for Docker health checks and load balancer probes.
How:   Answers without touching the database; a running process that can
       serve HTTP reports "ok".
"""

from fastapi import APIRouter

from todo_api import __version__
from todo_api.schemas.todo import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)
