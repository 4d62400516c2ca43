"""
Abstract base client for remote PII redaction.

Defines the interface the field redactor talks to. Keeping it abstract lets
the processor run against Presidio in production and against in-memory stubs
in tests without touching the walker.
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

from presidio_redaction.presidio.models import (
    AnonymizeResult,
    Anonymizer,
    DetectionResult,
)


logger = structlog.get_logger(__name__)


class BaseRedactionClient(ABC):
    """
    Abstract base class for detect/anonymize clients.

    Responsibilities:
    - Send detect and anonymize requests to the remote service
    - Parse responses into the wire models
    - Map transport, status and decoding failures to PresidioClientError subclasses

    Does NOT handle:
    - Sequencing detect before anonymize (that's FieldRedactor's job)
    - Walking telemetry batches (that's PresidioRedactionProcessor's job)
    - Retries of any kind
    """

    @abstractmethod
    async def detect(
        self,
        text: str,
        language: str = "en",
        score_threshold: float = 0.5,
        timeout: Optional[float] = None,
    ) -> DetectionResult:
        """
        Detect PII entities in text.

        Args:
            text: Text to analyze
            language: Language tag sent to the analyzer
            score_threshold: Minimum confidence for a finding
            timeout: Per-call timeout override in seconds

        Returns:
            Ordered list of findings (possibly empty)

        Raises:
            TransportError: Request could not be sent or connection failed
            ServiceError: Non-2xx status
            DecodeError: Body is not the expected JSON
        """
        pass

    @abstractmethod
    async def anonymize(
        self,
        text: str,
        analyzer_results: DetectionResult,
        anonymizers: Optional[dict[str, Anonymizer]] = None,
        timeout: Optional[float] = None,
    ) -> AnonymizeResult:
        """
        Anonymize text given the findings returned by detect.

        Same error taxonomy as detect.
        """
        pass

    async def health_check(self) -> dict[str, bool]:
        """
        Check whether the remote services are reachable.

        Should not raise. Default implementation reports nothing.
        """
        return {}

    async def close(self):
        """
        Close client connections and cleanup resources.

        Default implementation does nothing.
        """
        logger.debug("Closing redaction client", client_class=self.__class__.__name__)
