"""Error taxonomy shared by the proxy endpoints and the upstream clients."""
from __future__ import annotations

from typing import Optional


class ProxyError(Exception):
    """Base error rendered to callers as ``{"message", "details", "error"}``."""

    status_code = 500

    def __init__(self, message: str, *, details: Optional[str] = None, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.error = error

    def to_dict(self) -> dict[str, str]:
        body = {"message": self.message}
        if self.details is not None:
            body["details"] = self.details
        if self.error is not None:
            body["error"] = self.error
        return body


class ValidationError(ProxyError):
    """Caller input is missing or malformed."""

    status_code = 400


class ConfigurationError(ProxyError):
    """A deployment credential is not configured."""


class UpstreamError(ProxyError):
    """A third-party API answered with a non-success status."""

    def __init__(self, message: str, status_code: int, body: str):
        super().__init__(message, details=body)
        self.status_code = status_code


class ParseError(ProxyError):
    """A third-party response did not have the expected shape."""


class TransportError(ProxyError):
    """The outbound call to a third-party API failed before a response arrived."""

    def __init__(self, message: str, exc: Exception):
        super().__init__(message, error=str(exc))
