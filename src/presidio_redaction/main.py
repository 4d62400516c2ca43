"""
FastAPI entry point for the Presidio redaction sidecar.
"""

import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from presidio_redaction.api.dependencies import get_processor
from presidio_redaction.api.middleware import RequestTracingMiddleware
from presidio_redaction.api.routes import router
from presidio_redaction.config import settings
from presidio_redaction.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT, settings.APP_VERSION)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Presidio Redaction Processor",
    description="Redacts PII from OTLP/JSON traces and logs through Presidio",
    version=settings.APP_VERSION,
)

app.add_middleware(RequestTracingMiddleware)
app.include_router(router)


@app.on_event("startup")
async def startup():
    """Log the wiring and start the processor."""
    await get_processor().start()
    logger.info("Application startup complete", environment=settings.ENVIRONMENT)


@app.on_event("shutdown")
async def shutdown():
    """Close the pooled Presidio client."""
    await get_processor().shutdown()
    logger.info("Application shutdown complete")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "presidio_redaction.main:app",
        host="0.0.0.0",
        port=8000,
    )
