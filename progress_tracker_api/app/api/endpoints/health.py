"""
Health endpoint.

Reports whether the API can reach its database.  Intended for load
balancers and container orchestrators, so it never raises: any failure
is reported as a degraded status with HTTP 503.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...schemas.task import HealthStatus
from ...services.task_service import TaskService
from ..dependencies import get_task_service


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Check API and database health",
    responses={503: {"model": HealthStatus, "description": "Database unreachable"}},
)
async def health_check(service: TaskService = Depends(get_task_service)):
    try:
        healthy = await service.is_healthy()
    except Exception:
        logger.exception("Health check failed")
        healthy = False
    if healthy:
        return HealthStatus(status="ok", database="connected")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=HealthStatus(status="degraded", database="disconnected").model_dump(),
    )
