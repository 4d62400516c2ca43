"""
Presidio redaction processor: walks traces and logs batches and redacts
every free-text field in place.

Visited fields:
- traces: resource attributes, span attributes
- logs: resource attributes, log record attributes, log record body

Only ``str`` values are sent for redaction. Numbers, booleans, bytes, arrays
and kvlists are left untouched and never descended into.

Error policy: a failed remote call leaves that one field with its original
value, gets logged with enough context to find the field, and processing
moves on. ``process_traces`` / ``process_logs`` never raise because of a
remote failure, so the pipeline always gets its batch back.

NOTE: this favours availability over a strict redaction guarantee. While
Presidio is degraded, unredacted values reach downstream consumers. Watch
``redaction_fields_total{outcome="failed"}``.
"""

import asyncio
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Iterator, Optional

import structlog

from presidio_redaction.config import RedactionProcessorConfig
from presidio_redaction.models.telemetry import LogRecord, LogsData, TracesData
from presidio_redaction.monitoring.metrics import redaction_fields_total
from presidio_redaction.presidio.base_client import BaseRedactionClient
from presidio_redaction.presidio.client import PresidioClient
from presidio_redaction.presidio.exceptions import PresidioClientError
from presidio_redaction.redactor import FieldRedactor


@dataclass
class _Field:
    """A string value located in the batch plus the way to write it back."""
    kind: str
    key: str
    value: str
    assign: Callable[[str], None]
    location: dict[str, int]


@dataclass
class _Run:
    """Counters for one process_* call."""
    signal: str
    deadline: Optional[float] = None
    redacted: int = 0
    failed: int = 0
    skipped: int = 0


def _string_attributes(
    attributes: dict[str, Any], kind: str, location: dict[str, int]
) -> Iterator[_Field]:
    # Snapshot: keys present now are visited exactly once
    for key, value in list(attributes.items()):
        if isinstance(value, str):
            yield _Field(kind, key, value, partial(attributes.__setitem__, key), location)


def _log_body(record: LogRecord, location: dict[str, int]) -> Iterator[_Field]:
    if isinstance(record.body, str):
        yield _Field("log_body", "body", record.body, partial(setattr, record, "body"), location)


class PresidioRedactionProcessor:
    """
    Redacts PII in telemetry batches through a remote detect/anonymize service.

    Stateless across calls; the only shared resource is the client's
    connection pool, which is safe for concurrent use.
    """

    def __init__(
        self,
        config: RedactionProcessorConfig,
        client: Optional[BaseRedactionClient] = None,
        logger: Optional[Any] = None,
    ):
        """
        Args:
            config: Processor config block
            client: Redaction client; a PresidioClient is built from config when omitted
            logger: Structured logger provided by the host
        """
        self.config = config
        self._owns_client = client is None
        self.client = client or PresidioClient(
            analyzer_endpoint=config.analyzer_endpoint,
            anonymizer_endpoint=config.anonymizer_endpoint,
            timeout=config.timeout,
        )
        self.redactor = FieldRedactor(
            self.client,
            language=config.language,
            score_threshold=config.score_threshold,
            anonymizers=config.anonymizers,
        )
        self.logger = logger or structlog.get_logger(__name__)

    async def start(self):
        self.logger.info(
            "Presidio redaction processor started",
            analyzer_endpoint=self.config.analyzer_endpoint,
            anonymizer_endpoint=self.config.anonymizer_endpoint,
            max_concurrency=self.config.max_concurrency,
        )

    async def shutdown(self):
        if self._owns_client:
            await self.client.close()
        self.logger.info("Presidio redaction processor stopped")

    async def process_traces(self, batch: TracesData, timeout: Optional[float] = None) -> TracesData:
        """
        Redact string resource and span attributes in place.

        Args:
            batch: Traces batch, mutated in place
            timeout: Seconds for the whole batch; fields left when it runs out are skipped

        Returns:
            The same batch object
        """
        await self._redact_fields(self._trace_fields(batch), "traces", timeout)
        return batch

    async def process_logs(self, batch: LogsData, timeout: Optional[float] = None) -> LogsData:
        """
        Redact string resource attributes, record attributes and string bodies in place.

        Same contract as process_traces.
        """
        await self._redact_fields(self._log_fields(batch), "logs", timeout)
        return batch

    def _trace_fields(self, batch: TracesData) -> list[_Field]:
        fields: list[_Field] = []
        for i, rs in enumerate(batch.resource_spans):
            fields.extend(_string_attributes(
                rs.resource.attributes, "resource_attribute", {"resource": i}
            ))
            for j, ss in enumerate(rs.scope_spans):
                for k, span in enumerate(ss.spans):
                    fields.extend(_string_attributes(
                        span.attributes, "span_attribute", {"resource": i, "scope": j, "record": k}
                    ))
        return fields

    def _log_fields(self, batch: LogsData) -> list[_Field]:
        fields: list[_Field] = []
        for i, rl in enumerate(batch.resource_logs):
            fields.extend(_string_attributes(
                rl.resource.attributes, "resource_attribute", {"resource": i}
            ))
            for j, sl in enumerate(rl.scope_logs):
                for k, record in enumerate(sl.log_records):
                    location = {"resource": i, "scope": j, "record": k}
                    fields.extend(_string_attributes(record.attributes, "log_attribute", location))
                    fields.extend(_log_body(record, location))
        return fields

    async def _redact_fields(self, fields: list[_Field], signal: str, timeout: Optional[float]):
        run = _Run(signal=signal)
        if timeout is not None:
            run.deadline = asyncio.get_running_loop().time() + timeout

        if self.config.max_concurrency <= 1:
            for f in fields:
                await self._redact_one(f, run)
        else:
            semaphore = asyncio.Semaphore(self.config.max_concurrency)

            async def bounded(f: _Field):
                async with semaphore:
                    await self._redact_one(f, run)

            tasks = [asyncio.ensure_future(bounded(f)) for f in fields]
            try:
                await asyncio.gather(*tasks)
            except BaseException:
                # No field may still be written once the call has failed
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        if run.skipped:
            self.logger.warning(
                "Batch deadline exceeded, remaining fields left unredacted",
                signal=signal,
                skipped=run.skipped,
                timeout=timeout,
            )
        self.logger.debug(
            "Batch processed",
            signal=signal,
            fields=len(fields),
            redacted=run.redacted,
            failed=run.failed,
            skipped=run.skipped,
        )

    async def _redact_one(self, f: _Field, run: _Run):
        if run.deadline is not None and asyncio.get_running_loop().time() >= run.deadline:
            run.skipped += 1
            redaction_fields_total.labels(signal=run.signal, field=f.kind, outcome="skipped").inc()
            return

        try:
            redacted = await self.redactor.redact(f.value, deadline=run.deadline)
        except PresidioClientError as e:
            run.failed += 1
            redaction_fields_total.labels(signal=run.signal, field=f.kind, outcome="failed").inc()
            self.logger.error(
                "Error retrieving the redacted value",
                signal=run.signal,
                field=f.kind,
                key=f.key,
                error=e.message,
                error_type=type(e).__name__,
                details=e.details,
                **f.location,
            )
            return

        f.assign(redacted)
        run.redacted += 1
        redaction_fields_total.labels(signal=run.signal, field=f.kind, outcome="redacted").inc()
