"""
Wire models for the Presidio analyzer and anonymizer REST APIs.

These models are internal to the client layer and describe exactly what goes
over the wire. They are separate from the telemetry models so the walker never
has to know about the remote contract.
"""

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class AnalyzerRequest(BaseModel):
    """
    Body of POST <analyzer_endpoint>.

    Only text, language and score_threshold are sent by default; the optional
    fields are dropped from the payload when unset.
    """
    model_config = ConfigDict(frozen=True)

    text: str
    language: str = "en"
    score_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    entities: Optional[list[str]] = None
    context: Optional[list[str]] = None
    correlation_id: Optional[str] = None
    return_decision_process: Optional[bool] = None
    ad_hoc_recognizers: Optional[list[str]] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class RecognizerResult(BaseModel):
    """
    One finding returned by the analyzer.

    Offsets are character positions into the analyzed text, end exclusive.
    Extra fields (analysis_explanation, recognition_metadata) are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    entity_type: str
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    score: float


DetectionResult = list[RecognizerResult]

detection_result_adapter: TypeAdapter[DetectionResult] = TypeAdapter(DetectionResult)


class AnonymizerConfig(BaseModel):
    """Base operator config. Subclasses add the operator specific fields."""
    type: str


class ReplaceAnonymizer(AnonymizerConfig):
    type: Literal["replace"] = "replace"
    new_value: str


class RedactAnonymizer(AnonymizerConfig):
    type: Literal["redact"] = "redact"


class MaskAnonymizer(AnonymizerConfig):
    type: Literal["mask"] = "mask"
    masking_char: str = Field(default="*", min_length=1, max_length=1)
    chars_to_mask: int = Field(..., ge=0)
    from_end: bool = False


class HashAnonymizer(AnonymizerConfig):
    type: Literal["hash"] = "hash"
    hash_type: Literal["sha256", "sha512", "md5"] = "sha256"


class EncryptAnonymizer(AnonymizerConfig):
    type: Literal["encrypt"] = "encrypt"
    key: str


Anonymizer = Union[
    ReplaceAnonymizer,
    RedactAnonymizer,
    MaskAnonymizer,
    HashAnonymizer,
    EncryptAnonymizer,
]


class AnonymizerRequest(BaseModel):
    """
    Body of POST <anonymizer_endpoint>.

    ``anonymizers`` maps an entity type (or ``DEFAULT``) to an operator config.
    An empty mapping leaves the choice of operator to the service.
    """
    model_config = ConfigDict(frozen=True)

    text: str
    anonymizers: dict[str, Anonymizer] = Field(default_factory=dict)
    analyzer_results: DetectionResult = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class OperatorResult(BaseModel):
    """Per-finding metadata the anonymizer reports for each replacement."""
    model_config = ConfigDict(extra="ignore")

    operator: Optional[str] = None
    entity_type: Optional[str] = None
    start: Optional[int] = None
    end: Optional[int] = None
    text: Optional[str] = None


class AnonymizeResult(BaseModel):
    """
    Anonymizer response.

    ``text`` is the consumer-facing replacement for the input. ``items`` is
    optional metadata and is not needed to redact a field.
    """
    model_config = ConfigDict(extra="ignore")

    text: str
    items: list[OperatorResult] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_operation_alias(cls, data: Any) -> Any:
        # Older anonymizer builds report a flat item with "operation"
        if isinstance(data, dict) and "operation" in data and "items" not in data:
            item = {k: data.get(k) for k in ("entity_type", "start", "end", "text")}
            item["operator"] = data["operation"]
            data = {**data, "items": [item]}
        return data
