"""
Presidio client implementation.

Communicates with the Presidio analyzer and anonymizer REST APIs using an
httpx AsyncClient. Supports:
- One JSON POST per operation, no retries
- Per-call timeout override (used to thread a batch deadline through)
- Connection pooling, safe for concurrent field redaction
- Health checks against both services
"""

import time
from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError

from presidio_redaction.presidio.base_client import BaseRedactionClient
from presidio_redaction.presidio.exceptions import (
    DecodeError,
    RequestTimeoutError,
    ServiceError,
    TransportError,
)
from presidio_redaction.presidio.models import (
    AnalyzerRequest,
    AnonymizeResult,
    Anonymizer,
    AnonymizerRequest,
    DetectionResult,
    detection_result_adapter,
)
from presidio_redaction.monitoring.metrics import (
    presidio_request_latency_seconds,
    presidio_requests_total,
)


logger = structlog.get_logger(__name__)

# Cap on how much of an error body ends up in logs and exception details
ERROR_BODY_EXCERPT = 512


class PresidioClient(BaseRedactionClient):
    """
    Presidio client using httpx for async HTTP communication.

    API Endpoints (full URLs, taken from configuration):
    - POST analyzer_endpoint: detect PII entities
    - POST anonymizer_endpoint: anonymize text using detected entities
    - GET <service root>/health: liveness of each service
    """

    def __init__(
        self,
        analyzer_endpoint: str,
        anonymizer_endpoint: str,
        timeout: float = 10.0,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Presidio client.

        Args:
            analyzer_endpoint: Full URL of the analyzer, e.g. http://presidio-analyzer:3000/analyze
            anonymizer_endpoint: Full URL of the anonymizer, e.g. http://presidio-anonymizer:3000/anonymize
            timeout: Default request timeout in seconds
            connection_limits: httpx connection pool limits (default: 20 max connections)
            transport: Optional httpx transport (tests pass an httpx.MockTransport)
        """
        self.analyzer_endpoint = analyzer_endpoint
        self.anonymizer_endpoint = anonymizer_endpoint
        self.timeout = timeout

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0
            )

        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport

        logger.info(
            "Presidio client initialized",
            analyzer_endpoint=analyzer_endpoint,
            anonymizer_endpoint=anonymizer_endpoint,
            timeout=timeout,
        )

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    async def detect(
        self,
        text: str,
        language: str = "en",
        score_threshold: float = 0.5,
        timeout: Optional[float] = None,
    ) -> DetectionResult:
        """
        Detect PII via POST analyzer_endpoint.

        Payload:
        {"text": "...", "language": "en", "score_threshold": 0.5}

        Response (array, one item per finding):
        [{"entity_type": "EMAIL_ADDRESS", "start": 0, "end": 17, "score": 1.0}]
        """
        request = AnalyzerRequest(
            text=text,
            language=language,
            score_threshold=score_threshold,
        )
        start_time = time.perf_counter()
        data = await self._post(
            "detect", self.analyzer_endpoint, request.to_payload(), timeout, start_time
        )

        # A single finding may come back as a bare object
        if isinstance(data, dict):
            data = [data]

        try:
            results = detection_result_adapter.validate_python(data)
        except ValidationError as e:
            self._record("detect", "decode_error", start_time)
            raise DecodeError(
                "Unexpected analyzer response shape",
                details={"endpoint": self.analyzer_endpoint, "errors": e.errors(include_url=False)}
            )

        logger.debug(
            "Presidio detect successful",
            findings=len(results),
            text_length=len(text),
        )
        self._record("detect", "success", start_time)
        return results

    async def anonymize(
        self,
        text: str,
        analyzer_results: DetectionResult,
        anonymizers: Optional[dict[str, Anonymizer]] = None,
        timeout: Optional[float] = None,
    ) -> AnonymizeResult:
        """
        Anonymize via POST anonymizer_endpoint.

        Payload:
        {"text": "...", "anonymizers": {}, "analyzer_results": [...]}

        Response:
        {"text": "<EMAIL_ADDRESS>", "items": [{"operator": "replace", ...}]}
        """
        request = AnonymizerRequest(
            text=text,
            anonymizers=anonymizers or {},
            analyzer_results=analyzer_results,
        )
        start_time = time.perf_counter()
        data = await self._post(
            "anonymize", self.anonymizer_endpoint, request.to_payload(), timeout, start_time
        )

        try:
            result = AnonymizeResult.model_validate(data)
        except ValidationError as e:
            self._record("anonymize", "decode_error", start_time)
            raise DecodeError(
                "Unexpected anonymizer response shape",
                details={"endpoint": self.anonymizer_endpoint, "errors": e.errors(include_url=False)}
            )

        logger.debug(
            "Presidio anonymize successful",
            items=len(result.items),
            text_length=len(text),
        )
        self._record("anonymize", "success", start_time)
        return result

    async def _post(
        self,
        operation: str,
        url: str,
        payload: dict[str, Any],
        timeout: Optional[float],
        start_time: float,
    ) -> Any:
        """Send one JSON POST and return the decoded body, mapping failures."""
        client = self._get_client()
        request_timeout = httpx.USE_CLIENT_DEFAULT if timeout is None else timeout

        try:
            response = await client.post(url, json=payload, timeout=request_timeout)
        except httpx.TimeoutException as e:
            self._record(operation, "timeout", start_time)
            logger.warning("Presidio request timeout", operation=operation, url=url, error=str(e))
            raise RequestTimeoutError(
                f"Presidio {operation} request timed out",
                details={"url": url, "timeout": timeout or self.timeout}
            )
        except httpx.DecodingError as e:
            # Body could not be decoded per its Content-Encoding
            self._record(operation, "decode_error", start_time)
            logger.warning("Failed to decode Presidio response body", operation=operation, url=url, error=str(e))
            raise DecodeError(
                f"Undecodable response body from Presidio {operation}",
                details={"url": url, "error_type": type(e).__name__, "parse_error": str(e)}
            )
        except httpx.RequestError as e:
            # Connection failures, protocol errors, redirect loops
            self._record(operation, "transport_error", start_time)
            logger.warning("Presidio network error", operation=operation, url=url, error=str(e))
            raise TransportError(
                f"Failed to execute Presidio {operation} request: {e}",
                details={"url": url, "error_type": type(e).__name__}
            )

        if not response.is_success:
            self._record(operation, "service_error", start_time)
            excerpt = response.text[:ERROR_BODY_EXCERPT]
            logger.warning(
                "Presidio HTTP error",
                operation=operation,
                url=url,
                status_code=response.status_code,
                error_text=excerpt,
            )
            raise ServiceError(
                f"Presidio service returned status code {response.status_code}",
                status_code=response.status_code,
                details={"url": url, "status": response.status_code, "error": excerpt}
            )

        try:
            return response.json()
        except ValueError as e:
            self._record(operation, "decode_error", start_time)
            logger.warning("Failed to parse Presidio response JSON", operation=operation, error=str(e))
            raise DecodeError(
                f"Invalid JSON response from Presidio {operation}",
                details={"url": url, "parse_error": str(e)}
            )

    @staticmethod
    def _record(operation: str, outcome: str, start_time: float):
        """Count one call and observe its latency, once, with the final outcome."""
        presidio_requests_total.labels(operation=operation, outcome=outcome).inc()
        presidio_request_latency_seconds.labels(
            operation=operation, success="true" if outcome == "success" else "false"
        ).observe(time.perf_counter() - start_time)

    async def health_check(self) -> dict[str, bool]:
        """
        Check both services via GET <service root>/health.

        Returns a map of service name to health, never raises.
        """
        client = self._get_client()
        status: dict[str, bool] = {}
        for name, endpoint in (
            ("analyzer", self.analyzer_endpoint),
            ("anonymizer", self.anonymizer_endpoint),
        ):
            health_url = httpx.URL(endpoint).join("/health")
            try:
                response = await client.get(health_url, timeout=5.0)
                status[name] = response.is_success
            except httpx.HTTPError as e:
                logger.warning("Presidio health check failed", service=name, error=str(e))
                status[name] = False
        return status

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed Presidio client connection")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"analyzer_endpoint={self.analyzer_endpoint}, "
            f"anonymizer_endpoint={self.anonymizer_endpoint}, "
            f"timeout={self.timeout}s)"
        )
