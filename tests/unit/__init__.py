"""
Unit tests for the Presidio redaction processor.

Test individual components in isolation:
- OTLP/JSON telemetry models (AnyValue decode/encode)
- Presidio HTTP client (payloads, error mapping, timeouts)
- Field redactor (detect then anonymize)
- Processor (structure walk, error absorption, deadline)
- Config, settings and registration factory
"""
