"""
FastAPI dependency injection for the redaction sidecar.

Provides singleton instances of the settings and of the processor (which owns
the pooled Presidio client).
"""

from functools import lru_cache

from presidio_redaction.config import Settings, settings
from presidio_redaction.processor import PresidioRedactionProcessor


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_processor() -> PresidioRedactionProcessor:
    """
    Get singleton processor with a pooled Presidio client.

    Uses @lru_cache so every request shares one connection pool.

    Returns:
        PresidioRedactionProcessor instance
    """
    return PresidioRedactionProcessor(get_settings().processor_config())
