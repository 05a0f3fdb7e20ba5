"""Failures talking to the remote SQL pipeline endpoint.

Neither error is retried.  Callers treat both as "the store is
unavailable" and surface a message; order submission wraps them in
``OrderSubmissionError``.
"""

from __future__ import annotations

from storefront.domain.exceptions import RemoteStoreError


class GatewayError(RemoteStoreError):
    """Base class for pipeline endpoint failures."""


class TransportError(GatewayError):
    """The endpoint could not be reached or answered with a non-2xx status.

    ``status`` is None when no HTTP response was received at all.
    """

    def __init__(self, status: int | None, body: str) -> None:
        if status is None:
            message = f"Pipeline request failed: {body}"
        else:
            message = f"Pipeline HTTP error {status}: {body}"
        super().__init__(message)
        self.status = status
        self.body = body


class ProtocolError(GatewayError):
    """A well-formed HTTP response whose envelope is not a usable result."""
