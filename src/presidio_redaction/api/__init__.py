"""
FastAPI sidecar routes and endpoints.

- routes.py: POST /v1/traces, POST /v1/logs, GET /health, GET /
- dependencies.py: Dependency injection for settings and the processor
- middleware.py: Request id tracing
- models.py: Health and service info response models
"""

from presidio_redaction.api import dependencies, models
from presidio_redaction.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "models",
]
