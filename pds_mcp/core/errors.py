"""Failure kinds raised inside the request envelope.

None of these leave a binding: `core.envelope.EndpointBinding` catches them and
returns `{"error": str(exc)}` instead.
"""
from typing import Any


class DataServiceError(Exception):
    """Base class for every failure the envelope knows how to flatten."""


class ValidationError(DataServiceError):
    """Arguments did not satisfy the descriptor; no request was sent."""


class TransportError(DataServiceError):
    """Network, DNS or timeout failure while talking to the service."""


class RemoteError(DataServiceError):
    """The service answered with a non-2xx status."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Error {status_code}: {body}")


class DecodeError(DataServiceError):
    """A 2xx body did not match the declared content type."""
