"""
Failures raised by the SendGrid stats fetch.

Every fetch either returns a (possibly empty) metrics dict or raises one of
these; there are no partial results.
"""
from __future__ import annotations


class SendgridError(Exception):
    """Base class for fetch failures."""


class SendgridConfigError(SendgridError):
    """The stats endpoint URL could not be built."""


class SendgridTransportError(SendgridError):
    """Connection, DNS, TLS or timeout failure talking to the API."""


class SendgridStatusError(SendgridError):
    """The API answered with something other than 200."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Sendgrid returns status {status_code}: {body}")


class SendgridDecodeError(SendgridError):
    """The 200 response body was not a stats array."""

    def __init__(self, message: str, body: str):
        self.body = body
        super().__init__(message)


__all__ = [
    "SendgridError",
    "SendgridConfigError",
    "SendgridTransportError",
    "SendgridStatusError",
    "SendgridDecodeError",
]
