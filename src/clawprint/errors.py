"""Client error types."""

from __future__ import annotations


class ClawprintError(RuntimeError):
    """Base client error."""


class TransportError(ClawprintError):
    """API could not be reached."""


class APITimeoutError(TransportError):
    """Request exceeded the configured timeout and was aborted."""


class ResponseParseError(ClawprintError):
    """Server answered 2xx with a body that is not JSON."""


class RequestEncodingError(ClawprintError):
    """Request body could not be serialized to JSON."""


class APIRequestError(ClawprintError):
    """API returned a non-2xx response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409


class CredentialStoreError(ClawprintError):
    """Local credential file could not be read or written."""


class ConfigError(ValueError):
    """Raised when client settings are invalid."""
