"""
Integration tests for the Presidio redaction processor.

- Sidecar API end-to-end with a stubbed Presidio transport
- Live Presidio analyzer/anonymizer (skipped when not reachable)
"""
