"""Monitoring and metrics instrumentation for the Presidio redaction processor.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from presidio_redaction.monitoring.metrics import (
    presidio_request_latency_seconds,
    presidio_requests_total,
    redaction_fields_total,
)

__all__ = [
    "presidio_requests_total",
    "presidio_request_latency_seconds",
    "redaction_fields_total",
]
