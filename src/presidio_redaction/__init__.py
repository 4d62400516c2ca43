"""
Presidio redaction processor for telemetry pipelines.

Redacts PII from traces and logs by delegating detection and anonymization to
the Presidio analyzer and anonymizer services:
- Walks resource attributes, span/log attributes and log bodies
- Runs detect then anonymize for every string field
- Writes results back in place, leaving a field untouched when its redaction fails

Architecture: httpx Presidio client + field redactor + structure walker,
with an optional FastAPI sidecar for OTLP/JSON.
"""

from presidio_redaction.config import RedactionProcessorConfig
from presidio_redaction.processor import PresidioRedactionProcessor

__all__ = ["RedactionProcessorConfig", "PresidioRedactionProcessor"]

__version__ = "0.1.0"
