"""
Field redaction: one text value in, its anonymized replacement out.

Runs the two-hop Presidio protocol for a single field: detect, then anonymize
using detect's findings. No retries and no batching of several fields into
one call. Errors from either hop propagate unchanged.
"""

import asyncio
from typing import Optional

import structlog

from presidio_redaction.presidio.base_client import BaseRedactionClient
from presidio_redaction.presidio.exceptions import RequestTimeoutError
from presidio_redaction.presidio.models import Anonymizer


logger = structlog.get_logger(__name__)


def remaining_time(deadline: Optional[float], operation: str) -> Optional[float]:
    """
    Seconds left before deadline (event loop clock), or None when unbounded.

    Raises:
        RequestTimeoutError: deadline already passed
    """
    if deadline is None:
        return None
    remaining = deadline - asyncio.get_running_loop().time()
    if remaining <= 0:
        raise RequestTimeoutError(
            f"Deadline exceeded before {operation}",
            details={"operation": operation}
        )
    return remaining


class FieldRedactor:
    """Redacts one string at a time through a BaseRedactionClient."""

    def __init__(
        self,
        client: BaseRedactionClient,
        language: str = "en",
        score_threshold: float = 0.5,
        anonymizers: Optional[dict[str, Anonymizer]] = None,
    ):
        self.client = client
        self.language = language
        self.score_threshold = score_threshold
        self.anonymizers = anonymizers or {}

    async def redact(self, text: str, deadline: Optional[float] = None) -> str:
        """
        Return the anonymized version of text.

        Args:
            text: Original field value
            deadline: Event loop time by which both calls must be done. The
                time left is passed as the timeout of each call.

        Raises:
            PresidioClientError: Either hop failed; anonymize is not called
                when detect fails
        """
        findings = await self.client.detect(
            text,
            language=self.language,
            score_threshold=self.score_threshold,
            timeout=remaining_time(deadline, "detect"),
        )
        result = await self.client.anonymize(
            text,
            findings,
            anonymizers=self.anonymizers,
            timeout=remaining_time(deadline, "anonymize"),
        )
        logger.debug("Field redacted", findings=len(findings), changed=result.text != text)
        return result.text
