"""Shared test fixtures and configuration for all tests.

Provides an in-process Presidio stub (served through httpx.MockTransport),
processor config, and factories for traces and logs batches.
"""

import json
from typing import Any, Callable, Optional
from unittest.mock import Mock

import httpx
import pytest

from presidio_redaction.config import RedactionProcessorConfig
from presidio_redaction.models.telemetry import (
    LogRecord,
    LogsData,
    Resource,
    ResourceLogs,
    ResourceSpans,
    ScopeLogs,
    ScopeSpans,
    Span,
    TracesData,
)
from presidio_redaction.presidio.client import PresidioClient


ANALYZER_ENDPOINT = "http://presidio-analyzer.test/analyze"
ANONYMIZER_ENDPOINT = "http://presidio-anonymizer.test/anonymize"


def full_text_finding(body: dict[str, Any]) -> httpx.Response:
    """Analyzer answer: one finding covering the whole text."""
    return httpx.Response(200, json=[{
        "entity_type": "PII",
        "start": 0,
        "end": len(body["text"]),
        "score": 0.85,
    }])


def redacted_text(body: dict[str, Any]) -> httpx.Response:
    """Anonymizer answer: always <REDACTED>."""
    return httpx.Response(200, json={
        "text": "<REDACTED>",
        "items": [{"operator": "replace", "entity_type": "PII", "start": 0, "end": 10, "text": "<REDACTED>"}],
    })


class StubPresidio:
    """In-process Presidio analyzer + anonymizer.

    Every request is recorded as (host, path, json body). ``analyze`` and
    ``anonymize`` take the decoded request body and return an httpx.Response;
    swap them per test to script failures.
    """

    def __init__(self):
        self.requests: list[tuple[str, str, Optional[dict]]] = []
        self.analyze: Callable[[dict], httpx.Response] = full_text_finding
        self.anonymize: Callable[[dict], httpx.Response] = redacted_text
        self.healthy = {"presidio-analyzer.test": True, "presidio-anonymizer.test": True}

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.url.host, request.url.path, body))

        if request.url.path == "/health":
            return httpx.Response(200 if self.healthy.get(request.url.host) else 503, text="ok")
        if request.url.path == "/analyze":
            return self.analyze(body)
        if request.url.path == "/anonymize":
            return self.anonymize(body)
        return httpx.Response(404)

    def calls(self, path: str) -> list[dict]:
        return [body for _, p, body in self.requests if p == path]


@pytest.fixture
def stub_presidio() -> StubPresidio:
    return StubPresidio()


@pytest.fixture
def presidio_client(stub_presidio: StubPresidio) -> PresidioClient:
    """PresidioClient wired to the stub through httpx.MockTransport."""
    return PresidioClient(
        analyzer_endpoint=ANALYZER_ENDPOINT,
        anonymizer_endpoint=ANONYMIZER_ENDPOINT,
        timeout=5.0,
        transport=httpx.MockTransport(stub_presidio.handler),
    )


@pytest.fixture
def processor_config() -> RedactionProcessorConfig:
    return RedactionProcessorConfig(
        analyzer_endpoint=ANALYZER_ENDPOINT,
        anonymizer_endpoint=ANONYMIZER_ENDPOINT,
    )


@pytest.fixture
def host_logger() -> Mock:
    """Stands in for the structured logger a pipeline host hands over."""
    return Mock()


@pytest.fixture
def create_traces():
    """Factory fixture for a one-resource, one-scope traces batch.

    Usage:
        batch = create_traces(resource_attrs={"email": "a@b.c"}, spans=[{"ssn": "..."}])
    """
    def _create(
        resource_attrs: Optional[dict[str, Any]] = None,
        spans: Optional[list[dict[str, Any]]] = None,
    ) -> TracesData:
        return TracesData(resource_spans=[
            ResourceSpans(
                resource=Resource(attributes=dict(resource_attrs or {})),
                scope_spans=[ScopeSpans(spans=[
                    Span(name=f"span-{i}", span_id=f"{i:016x}", attributes=dict(attrs))
                    for i, attrs in enumerate(spans or [])
                ])],
            )
        ])

    return _create


@pytest.fixture
def create_logs():
    """Factory fixture for a one-resource, one-scope logs batch.

    Each record is given as (body, attributes).
    """
    def _create(
        resource_attrs: Optional[dict[str, Any]] = None,
        records: Optional[list[tuple[Any, dict[str, Any]]]] = None,
    ) -> LogsData:
        return LogsData(resource_logs=[
            ResourceLogs(
                resource=Resource(attributes=dict(resource_attrs or {})),
                scope_logs=[ScopeLogs(log_records=[
                    LogRecord(body=body, attributes=dict(attrs), severity_text="INFO")
                    for body, attrs in (records or [])
                ])],
            )
        ])

    return _create
