"""Custom Prometheus metrics for the Presidio redaction processor.

These metrics are exposed at /metrics when the sidecar runs with
PROMETHEUS_ENABLED. Alert rules should be configured for:
- redaction_fields_total{outcome="failed"} (fields forwarded unredacted)
- presidio_requests_total{outcome!="success"} (degraded Presidio services)
"""

from prometheus_client import Counter, Histogram

# === Presidio Client Metrics ===

presidio_requests_total = Counter(
    "presidio_requests_total",
    "Total Presidio requests by operation and outcome",
    ["operation", "outcome"],
)
"""
Presidio request counter.

Labels:
- operation: detect, anonymize
- outcome: success, transport_error, timeout, service_error, decode_error
"""

presidio_request_latency_seconds = Histogram(
    "presidio_request_latency_seconds",
    "Presidio request latency in seconds",
    ["operation", "success"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
"""
Presidio request latency histogram.

Labels:
- operation: detect, anonymize
- success: true, false

Alert thresholds:
- WARN: p95 > 250ms (redaction adds two round trips per field)
"""

# === Redaction Metrics ===

redaction_fields_total = Counter(
    "redaction_fields_total",
    "Total string fields visited by the redaction processor",
    ["signal", "field", "outcome"],
)
"""
Field redaction counter.

Labels:
- signal: traces, logs
- field: resource_attribute, span_attribute, log_attribute, log_body
- outcome: redacted, failed (original value kept), skipped (deadline spent)

Alert thresholds:
- WARN: any failed outcome (unredacted values reached downstream consumers)
"""
