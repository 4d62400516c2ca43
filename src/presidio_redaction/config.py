"""
Configuration for the Presidio redaction processor.

Two layers:
- RedactionProcessorConfig: the processor's own config block, handed over by
  the pipeline host (analyzer_endpoint and anonymizer_endpoint are required).
- Settings: environment settings for the standalone sidecar, loaded from
  environment variables with sensible defaults (use .env for local development).
"""

from typing import Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from presidio_redaction.presidio.models import Anonymizer


class RedactionProcessorConfig(BaseModel):
    """
    Processor config block.

    Both endpoints must be absolute http(s) URLs pointing at the respective
    Presidio service route (e.g. http://presidio-analyzer:3000/analyze).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    analyzer_endpoint: str = Field(..., description="Full URL of the Presidio analyzer")
    anonymizer_endpoint: str = Field(..., description="Full URL of the Presidio anonymizer")
    language: str = Field(default="en", min_length=1, description="Language tag sent to the analyzer")
    score_threshold: float = Field(default=0.5, ge=0.0, le=1.0, description="Minimum finding confidence")
    anonymizers: dict[str, Anonymizer] = Field(
        default_factory=dict,
        description="Operator per entity type; empty leaves the choice to the service"
    )
    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")
    max_concurrency: int = Field(default=1, ge=1, description="Fields redacted in parallel (1 = sequential)")

    @field_validator("analyzer_endpoint", "anonymizer_endpoint")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("endpoint must not be empty")
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"endpoint must be an absolute http(s) URL, got {value!r}")
        return value


class Settings(BaseSettings):
    """Sidecar settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Presidio Redaction Processor"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # === Presidio ===
    ANALYZER_ENDPOINT: str = "http://presidio-analyzer:3000/analyze"
    ANONYMIZER_ENDPOINT: str = "http://presidio-anonymizer:3000/anonymize"
    PRESIDIO_LANGUAGE: str = "en"
    PRESIDIO_SCORE_THRESHOLD: float = 0.5
    PRESIDIO_TIMEOUT: float = 10.0  # seconds, per request
    # JSON object, e.g. {"DEFAULT": {"type": "replace", "new_value": "<PII>"}}
    ANONYMIZERS: dict[str, Anonymizer] = Field(default_factory=dict)

    # === Processing ===
    MAX_CONCURRENCY: int = 1
    BATCH_TIMEOUT: Optional[float] = None  # seconds for a whole batch, None = unbounded

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    def processor_config(self) -> RedactionProcessorConfig:
        """Build the processor config block from these settings."""
        return RedactionProcessorConfig(
            analyzer_endpoint=self.ANALYZER_ENDPOINT,
            anonymizer_endpoint=self.ANONYMIZER_ENDPOINT,
            language=self.PRESIDIO_LANGUAGE,
            score_threshold=self.PRESIDIO_SCORE_THRESHOLD,
            anonymizers=self.ANONYMIZERS,
            timeout=self.PRESIDIO_TIMEOUT,
            max_concurrency=self.MAX_CONCURRENCY,
        )


# Global settings instance
settings = Settings()
