"""
Custom exceptions for the Presidio client layer.

These exceptions give the redaction pipeline a structured view of what went
wrong on a remote call, so the structure walker can log a precise reason for
each field it had to leave unredacted.
"""


class PresidioClientError(Exception):
    """
    Base exception for all Presidio client errors.

    All remote-redaction exceptions inherit from this to allow catching
    any of them with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransportError(PresidioClientError):
    """
    Raised when the request could not be sent or the connection failed.

    Includes DNS failures, refused connections, resets and timeouts.
    Not retried by the processor.
    """
    pass


class RequestTimeoutError(TransportError):
    """
    Raised when a request exceeds its timeout.

    Separate from generic transport errors so callers can tell a spent
    batch deadline apart from an unreachable service.
    """
    pass


class ServiceError(PresidioClientError):
    """
    Raised when the service is reachable but answers with a non-2xx status.

    The status code and a short excerpt of the body are kept in details.
    """
    def __init__(self, message: str, status_code: int, details: dict | None = None):
        super().__init__(message, details)
        self.status_code = status_code


class DecodeError(PresidioClientError):
    """
    Raised when the response body is not valid JSON or does not have the
    expected shape.
    """
    pass
