"""
Integration tests for the FastAPI sidecar.

Uses TestClient with the processor dependency overridden so Presidio is the
in-process stub from conftest.py.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from presidio_redaction.api.dependencies import get_processor
from presidio_redaction.main import app
from presidio_redaction.processor import PresidioRedactionProcessor


TRACES = {
    "resourceSpans": [{
        "resource": {"attributes": [
            {"key": "email", "value": {"stringValue": "alice@example.com"}},
            {"key": "pid", "value": {"intValue": "4242"}},
        ]},
        "scopeSpans": [{
            "scope": {"name": "tests"},
            "spans": [{
                "traceId": "5b8efff798038103d269b633813fc60c",
                "spanId": "eee19b7ec3c1b174",
                "name": "GET /users",
                "attributes": [{"key": "ssn", "value": {"stringValue": "123-45-6789"}}],
            }],
        }],
    }]
}

LOGS = {
    "resourceLogs": [{
        "resource": {"attributes": []},
        "scopeLogs": [{
            "logRecords": [{
                "timeUnixNano": "1544712660300000000",
                "severityText": "INFO",
                "body": {"stringValue": "call me at 555-1234"},
                "attributes": [{"key": "user", "value": {"stringValue": "Bob"}}],
            }],
        }],
    }]
}


@pytest.fixture
def client(processor_config, presidio_client, host_logger):
    processor = PresidioRedactionProcessor(processor_config, client=presidio_client, logger=host_logger)
    app.dependency_overrides[get_processor] = lambda: processor
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root_endpoint(client):
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["capabilities"] == {"mutates_data": True}
    assert data["endpoints"]["traces"] == "/v1/traces"


def test_redact_traces(client):
    response = client.post("/v1/traces", json=TRACES)

    assert response.status_code == 200
    assert "X-Request-ID" in response.headers
    rs = response.json()["resourceSpans"][0]
    assert rs["resource"]["attributes"] == [
        {"key": "email", "value": {"stringValue": "<REDACTED>"}},
        {"key": "pid", "value": {"intValue": "4242"}},
    ]
    span = rs["scopeSpans"][0]["spans"][0]
    assert span["name"] == "GET /users"
    assert span["attributes"] == [{"key": "ssn", "value": {"stringValue": "<REDACTED>"}}]


def test_redact_logs(client, stub_presidio):
    stub_presidio.anonymize = lambda body: httpx.Response(200, json={
        "text": "call me at <PHONE>" if body["text"] == "call me at 555-1234" else "<PERSON>",
    })

    response = client.post("/v1/logs", json=LOGS)

    assert response.status_code == 200
    record = response.json()["resourceLogs"][0]["scopeLogs"][0]["logRecords"][0]
    assert record["body"] == {"stringValue": "call me at <PHONE>"}
    assert record["attributes"] == [{"key": "user", "value": {"stringValue": "<PERSON>"}}]
    assert record["timeUnixNano"] == "1544712660300000000"


def test_presidio_down_still_returns_batch(client, stub_presidio, host_logger):
    stub_presidio.analyze = lambda body: httpx.Response(500, text="down")

    response = client.post("/v1/traces", json=TRACES)

    assert response.status_code == 200
    rs = response.json()["resourceSpans"][0]
    assert rs["resource"]["attributes"][0] == {"key": "email", "value": {"stringValue": "alice@example.com"}}
    assert host_logger.error.call_count == 2


def test_malformed_batch_rejected(client, stub_presidio):
    response = client.post("/v1/traces", json={"resourceSpans": [{"scopeSpans": [{"spans": [
        {"attributes": [{"key": "k", "value": {"stringValue": 1}}]}
    ]}]}]})

    assert response.status_code == 422
    assert stub_presidio.requests == []


def test_health_endpoint(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["services"] == {"analyzer": "ok", "anonymizer": "ok"}


def test_health_endpoint_unhealthy(client, stub_presidio):
    stub_presidio.healthy["presidio-analyzer.test"] = False

    response = client.get("/health")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["services"]["analyzer"] == "unreachable"


def test_request_id_echoed(client):
    response = client.post("/v1/traces", json=TRACES, headers={"X-Request-ID": "export-42"})

    assert response.headers["X-Request-ID"] == "export-42"
