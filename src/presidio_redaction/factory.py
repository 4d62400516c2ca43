"""
Registration surface for pipeline hosts.

The host owns instantiation, lifecycle and wiring. This module only declares
what the component is (type, stability, capabilities) and how to build a
traces or logs processor from a config block.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from presidio_redaction.config import RedactionProcessorConfig
from presidio_redaction.processor import PresidioRedactionProcessor


TYPE = "presidio_redaction"
TRACES_STABILITY = "development"
LOGS_STABILITY = "development"


@dataclass(frozen=True)
class Capabilities:
    mutates_data: bool


CAPABILITIES = Capabilities(mutates_data=True)


def create_default_config() -> RedactionProcessorConfig:
    """
    Config with empty endpoints for the host to fill in.

    Built without validation; the endpoints are checked when a processor is
    created from it.
    """
    return RedactionProcessorConfig.model_construct(
        analyzer_endpoint="",
        anonymizer_endpoint="",
        language="en",
        score_threshold=0.5,
        anonymizers={},
        timeout=10.0,
        max_concurrency=1,
    )


def _validated(config: Union[RedactionProcessorConfig, dict[str, Any]]) -> RedactionProcessorConfig:
    if isinstance(config, RedactionProcessorConfig):
        config = config.model_dump()
    return RedactionProcessorConfig.model_validate(config)


def create_traces_processor(
    config: Union[RedactionProcessorConfig, dict[str, Any]],
    logger: Optional[Any] = None,
) -> PresidioRedactionProcessor:
    """Build a processor whose host-facing entry point is ``process_traces``."""
    return PresidioRedactionProcessor(_validated(config), logger=logger)


def create_logs_processor(
    config: Union[RedactionProcessorConfig, dict[str, Any]],
    logger: Optional[Any] = None,
) -> PresidioRedactionProcessor:
    """Build a processor whose host-facing entry point is ``process_logs``."""
    return PresidioRedactionProcessor(_validated(config), logger=logger)
