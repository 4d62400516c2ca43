"""
API-specific response models for the sidecar endpoints.

Request and response bodies of the /v1/* routes are the telemetry models
themselves (OTLP/JSON), so only health and service info live here.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "unhealthy"]
    )
    version: str = Field(
        description="Processor version",
        examples=["0.1.0"]
    )
    services: dict[str, str] = Field(
        description="Presidio service health",
        examples=[{"analyzer": "ok", "anonymizer": "unreachable"}]
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Health check timestamp (UTC)"
    )


class ServiceInfo(BaseModel):
    """Response for the root endpoint."""

    service: str
    version: str
    capabilities: dict[str, bool]
    endpoints: dict[str, str]
