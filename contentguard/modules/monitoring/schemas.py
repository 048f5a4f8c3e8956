from pydantic import BaseModel, Field

from contentguard.modules.moderation.schemas import ModerationStats


class ServiceStatus(BaseModel):
    """Individual dependency check."""

    name: str = Field(..., description="Dependency name")
    status: str = Field(..., description="ok or error")
    message: str | None = Field(None, description="Additional status information")
    response_time_ms: float | None = Field(None, description="Response time in milliseconds")


class HealthResponse(BaseModel):
    status: str = Field(default="ok", description="Application is alive")
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    uptime_seconds: float


class ReadinessResponse(BaseModel):
    status: str = Field(..., description="Application readiness: ready, not_ready")
    timestamp: str
    checks: dict[str, ServiceStatus]


class ProcessInfo(BaseModel):
    pid: int
    uptime_seconds: float
    cpu_time_seconds: float
    python_version: str


class MetricsResponse(BaseModel):
    timestamp: str
    moderation: ModerationStats | None = None
    process: ProcessInfo
