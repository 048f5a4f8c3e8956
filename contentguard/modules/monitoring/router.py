from fastapi import APIRouter, Depends, status

from contentguard.modules.monitoring.schemas import HealthResponse, MetricsResponse, ReadinessResponse
from contentguard.modules.monitoring.service import MonitoringService, get_monitoring_service

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness Probe",
    description="Returns 200 while the process is running. Does not check dependencies.",
)
async def health(service: MonitoringService = Depends(get_monitoring_service)):
    return service.get_health()


@router.get(
    "/readiness",
    response_model=ReadinessResponse,
    summary="Readiness Probe",
    description="Checks the database, Redis and the moderation configuration.",
)
async def readiness(service: MonitoringService = Depends(get_monitoring_service)):
    return await service.get_readiness()


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    summary="Performance Metrics",
    description="Moderation request, cache and cost-savings statistics plus process information.",
)
async def metrics(service: MonitoringService = Depends(get_monitoring_service)):
    return service.get_metrics()
