"""
Sidecar routes.

POST /v1/traces and POST /v1/logs take an OTLP/JSON batch, redact it and
return it. A well-formed batch always comes back with 200, even when some
fields could not be redacted; a malformed one is rejected with 422 by request
validation.
"""

import time

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram

from presidio_redaction.api.dependencies import get_processor, get_settings
from presidio_redaction.api.models import HealthResponse, ServiceInfo
from presidio_redaction.config import Settings
from presidio_redaction.factory import CAPABILITIES
from presidio_redaction.models.telemetry import LogsData, TracesData
from presidio_redaction.processor import PresidioRedactionProcessor

logger = structlog.get_logger(__name__)

# Prometheus metrics
redaction_batches_total = Counter(
    "redaction_batches_total",
    "Total batches processed by the sidecar",
    ["signal"]
)

redaction_batch_duration_seconds = Histogram(
    "redaction_batch_duration_seconds",
    "Batch redaction duration in seconds",
    ["signal"]
)

router = APIRouter()


@router.get("/", response_model=ServiceInfo)
async def root(settings: Settings = Depends(get_settings)) -> ServiceInfo:
    """Service info with endpoint links."""
    return ServiceInfo(
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        capabilities={"mutates_data": CAPABILITIES.mutates_data},
        endpoints={
            "traces": "/v1/traces",
            "logs": "/v1/logs",
            "health": "/health",
        },
    )


@router.post(
    "/v1/traces",
    summary="Redact a traces batch",
    responses={
        200: {"description": "Batch redacted (failed fields keep their original value)"},
        422: {"description": "Malformed OTLP/JSON batch"},
    },
)
async def redact_traces(
    batch: TracesData,
    processor: PresidioRedactionProcessor = Depends(get_processor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    start_time = time.perf_counter()
    await processor.process_traces(batch, timeout=settings.BATCH_TIMEOUT)

    redaction_batches_total.labels(signal="traces").inc()
    redaction_batch_duration_seconds.labels(signal="traces").observe(time.perf_counter() - start_time)
    logger.info("Traces batch redacted", resource_spans=len(batch.resource_spans))
    return JSONResponse(content=batch.to_otlp_json())


@router.post(
    "/v1/logs",
    summary="Redact a logs batch",
    responses={
        200: {"description": "Batch redacted (failed fields keep their original value)"},
        422: {"description": "Malformed OTLP/JSON batch"},
    },
)
async def redact_logs(
    batch: LogsData,
    processor: PresidioRedactionProcessor = Depends(get_processor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    start_time = time.perf_counter()
    await processor.process_logs(batch, timeout=settings.BATCH_TIMEOUT)

    redaction_batches_total.labels(signal="logs").inc()
    redaction_batch_duration_seconds.labels(signal="logs").observe(time.perf_counter() - start_time)
    logger.info("Logs batch redacted", resource_logs=len(batch.resource_logs))
    return JSONResponse(content=batch.to_otlp_json())


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Presidio services health check",
    responses={
        200: {"description": "Both Presidio services healthy"},
        503: {"description": "One or both Presidio services unhealthy"},
    },
)
async def health_check(
    processor: PresidioRedactionProcessor = Depends(get_processor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    checks = await processor.client.health_check()
    services = {name: "ok" if healthy else "unreachable" for name, healthy in checks.items()}
    healthy = bool(checks) and all(checks.values())

    response = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=settings.APP_VERSION,
        services=services,
    )
    logger.info("Health check", status=response.status, services=services)

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )
