"""
Telemetry data models for traces and logs batches.

The models mirror the OTLP tree: a batch owns resource groups, a resource
group owns scope groups, a scope group owns records. Attribute maps and log
bodies hold plain Python values (str, int, float, bool, bytes, list, dict,
None) so the walker can mutate them in place.

Batches validate from, and serialize to, the OTLP/JSON encoding:
- camelCase keys (``resourceSpans``, ``scopeLogs``, ``timeUnixNano``...)
- attributes as ``[{"key": ..., "value": <AnyValue>}]``
- AnyValue wrappers (``{"stringValue": "..."}``, ``{"intValue": "42"}``...)

Native Python values are accepted as well, which keeps tests and embedding
code free of the wire encoding. Fields the models do not name (events, links,
status, schemaUrl...) are kept as-is and written back on serialization.
"""

import base64
import math
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


ANY_VALUE_KEYS = frozenset({
    "stringValue",
    "boolValue",
    "intValue",
    "doubleValue",
    "bytesValue",
    "arrayValue",
    "kvlistValue",
})

NON_FINITE_DOUBLES = {"nan": "NaN", "inf": "Infinity", "-inf": "-Infinity"}


def decode_any_value(value: Any) -> Any:
    """
    Convert an OTLP/JSON AnyValue into a plain Python value.

    Raises:
        ValueError: value is not a well-formed AnyValue
    """
    if not isinstance(value, dict):
        raise ValueError(f"AnyValue must be an object, got {type(value).__name__}")
    if not value:
        return None
    if len(value) != 1:
        raise ValueError(f"AnyValue must have exactly one key, got {sorted(value)}")

    key, inner = next(iter(value.items()))
    if key == "stringValue":
        if not isinstance(inner, str):
            raise ValueError("stringValue must be a string")
        return inner
    if key == "boolValue":
        if not isinstance(inner, bool):
            raise ValueError("boolValue must be a boolean")
        return inner
    if key == "intValue":
        # int64 is encoded as a decimal string in OTLP/JSON
        if isinstance(inner, bool) or not isinstance(inner, (int, str)):
            raise ValueError("intValue must be an integer or decimal string")
        return int(inner)
    if key == "doubleValue":
        if isinstance(inner, bool) or not isinstance(inner, (int, float, str)):
            raise ValueError("doubleValue must be a number")
        return float(inner)
    if key == "bytesValue":
        if not isinstance(inner, str):
            raise ValueError("bytesValue must be a base64 string")
        return base64.b64decode(inner, validate=True)
    if key in ("arrayValue", "kvlistValue"):
        if inner is None:
            inner = {}
        if not isinstance(inner, dict):
            raise ValueError(f"{key} must be an object")
        values = inner.get("values", [])
        if key == "arrayValue":
            if not isinstance(values, list):
                raise ValueError("arrayValue.values must be a list")
            return [decode_any_value(v) for v in values]
        return decode_key_values(values)
    raise ValueError(f"Unknown AnyValue key: {key}")


def decode_key_values(items: Any) -> dict[str, Any]:
    """Convert an OTLP/JSON KeyValue list into a dict."""
    if not isinstance(items, list):
        raise ValueError("KeyValue list expected")
    decoded: dict[str, Any] = {}
    for item in items:
        if not isinstance(item, dict) or not isinstance(item.get("key"), str):
            raise ValueError("KeyValue entry must be an object with a string key")
        decoded[item["key"]] = decode_any_value(item.get("value", {}))
    return decoded


def encode_any_value(value: Any) -> dict[str, Any]:
    """Convert a plain Python value into an OTLP/JSON AnyValue."""
    if value is None:
        return {}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"boolValue": value}
    if isinstance(value, int):
        return {"intValue": str(value)}
    if isinstance(value, float):
        if not math.isfinite(value):
            # JSON has no literal for these; OTLP/JSON spells them as strings
            return {"doubleValue": NON_FINITE_DOUBLES[repr(value)]}
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, (bytes, bytearray)):
        return {"bytesValue": base64.b64encode(bytes(value)).decode("ascii")}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_any_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"kvlistValue": {"values": encode_key_values(value)}}
    raise TypeError(f"Cannot encode {type(value).__name__} as AnyValue")


def encode_key_values(attributes: dict[str, Any]) -> list[dict[str, Any]]:
    return [{"key": k, "value": encode_any_value(v)} for k, v in attributes.items()]


def _decode_attributes(value: Any) -> Any:
    if value is None:
        return {}
    if isinstance(value, list):
        return decode_key_values(value)
    return value


def _decode_body(value: Any) -> Any:
    # An empty AnyValue is an empty body, not an empty kvlist
    if value == {}:
        return None
    if isinstance(value, dict) and len(value) == 1 and next(iter(value)) in ANY_VALUE_KEYS:
        return decode_any_value(value)
    return value


def _encode_body(value: Any) -> Optional[dict[str, Any]]:
    return None if value is None else encode_any_value(value)


Attributes = Annotated[
    dict[str, Any],
    BeforeValidator(_decode_attributes),
    PlainSerializer(encode_key_values, when_used="json"),
]

Body = Annotated[
    Any,
    BeforeValidator(_decode_body),
    PlainSerializer(_encode_body, when_used="json"),
]

# fixed64 nanosecond timestamps are decimal strings on the wire
UnixNano = Annotated[int, PlainSerializer(str, when_used="json")]


class OTLPModel(BaseModel):
    """Shared config: camelCase aliases, snake_case access, pass-through extras."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class Resource(OTLPModel):
    attributes: Attributes = Field(default_factory=dict)


class InstrumentationScope(OTLPModel):
    name: str = ""
    version: str = ""


class Span(OTLPModel):
    """A span. Only ``attributes`` is ever redacted."""
    trace_id: str = ""
    span_id: str = ""
    parent_span_id: str = ""
    name: str = ""
    kind: Union[int, str] = 0
    start_time_unix_nano: UnixNano = 0
    end_time_unix_nano: UnixNano = 0
    attributes: Attributes = Field(default_factory=dict)


class ScopeSpans(OTLPModel):
    scope: InstrumentationScope = Field(default_factory=InstrumentationScope)
    spans: list[Span] = Field(default_factory=list)


class ResourceSpans(OTLPModel):
    resource: Resource = Field(default_factory=Resource)
    scope_spans: list[ScopeSpans] = Field(default_factory=list)


class TracesData(OTLPModel):
    """A traces batch as delivered by the pipeline."""
    resource_spans: list[ResourceSpans] = Field(default_factory=list)

    @classmethod
    def from_otlp_json(cls, data: dict[str, Any]) -> "TracesData":
        return cls.model_validate(data)

    def to_otlp_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class LogRecord(OTLPModel):
    """A log record. ``attributes`` and a string ``body`` are redacted."""
    time_unix_nano: UnixNano = 0
    observed_time_unix_nano: UnixNano = 0
    severity_number: Union[int, str] = 0
    severity_text: str = ""
    body: Body = None
    attributes: Attributes = Field(default_factory=dict)
    trace_id: str = ""
    span_id: str = ""


class ScopeLogs(OTLPModel):
    scope: InstrumentationScope = Field(default_factory=InstrumentationScope)
    log_records: list[LogRecord] = Field(default_factory=list)


class ResourceLogs(OTLPModel):
    resource: Resource = Field(default_factory=Resource)
    scope_logs: list[ScopeLogs] = Field(default_factory=list)


class LogsData(OTLPModel):
    """A logs batch as delivered by the pipeline."""
    resource_logs: list[ResourceLogs] = Field(default_factory=list)

    @classmethod
    def from_otlp_json(cls, data: dict[str, Any]) -> "LogsData":
        return cls.model_validate(data)

    def to_otlp_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
