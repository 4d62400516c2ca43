"""
Pydantic data models for telemetry batches.

Includes:
- Traces: TracesData, ResourceSpans, ScopeSpans, Span
- Logs: LogsData, ResourceLogs, ScopeLogs, LogRecord
- Shared: Resource, InstrumentationScope
- OTLP/JSON AnyValue helpers
"""

from presidio_redaction.models.telemetry import (
    InstrumentationScope,
    LogRecord,
    LogsData,
    Resource,
    ResourceLogs,
    ResourceSpans,
    ScopeLogs,
    ScopeSpans,
    Span,
    TracesData,
    decode_any_value,
    encode_any_value,
)

__all__ = [
    # Shared
    "Resource",
    "InstrumentationScope",
    # Traces
    "TracesData",
    "ResourceSpans",
    "ScopeSpans",
    "Span",
    # Logs
    "LogsData",
    "ResourceLogs",
    "ScopeLogs",
    "LogRecord",
    # Codec
    "decode_any_value",
    "encode_any_value",
]
