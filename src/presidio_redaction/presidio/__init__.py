"""
Presidio client abstraction and implementation.

Components:
- BaseRedactionClient: Abstract base class for detect/anonymize clients
- PresidioClient: Implementation for the Presidio analyzer and anonymizer REST APIs
- models: Wire request/response models
- exceptions: Typed remote failures (transport, service, decode)
"""

from presidio_redaction.presidio.base_client import BaseRedactionClient
from presidio_redaction.presidio.client import PresidioClient
from presidio_redaction.presidio.exceptions import (
    DecodeError,
    PresidioClientError,
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
    RecognizerResult,
)

__all__ = [
    "BaseRedactionClient",
    "PresidioClient",
    "PresidioClientError",
    "TransportError",
    "RequestTimeoutError",
    "ServiceError",
    "DecodeError",
    "AnalyzerRequest",
    "AnonymizerRequest",
    "AnonymizeResult",
    "Anonymizer",
    "DetectionResult",
    "RecognizerResult",
]
