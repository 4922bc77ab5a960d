"""JSON-over-HTTP transport for the Clawprint API."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any

import requests

from clawprint.errors import (
    APIRequestError,
    APITimeoutError,
    RequestEncodingError,
    ResponseParseError,
    TransportError,
)
from clawprint.logging import get_logger

DEFAULT_TIMEOUT = 30.0

logger = get_logger(__name__)


def build_auth_header(api_key: str) -> str:
    return f"Bearer {api_key}"


def _error_message(status_code: int, body: object | None) -> str:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str) and error:
            return error
    return f"HTTP {status_code}"


@dataclass
class HTTPTransport:
    """One request, one response: no retries, no caching.

    ``api_key`` is the ``<public>:<secret>`` pair issued at agent registration.
    """

    base_url: str
    api_key: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = requests.Session()

    def __enter__(self) -> HTTPTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key:
            headers["Authorization"] = build_auth_header(self.api_key)
        return headers

    def request(self, method: str, path: str, body: object | None = None) -> Any:
        url = self.url(path)
        data: bytes | None = None
        if body is not None:
            try:
                data = json.dumps(body).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise RequestEncodingError(f"request body is not JSON-serializable: {exc}") from exc

        started = time.monotonic()
        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers=self.headers(),
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise APITimeoutError(f"request timed out after {self.timeout:g}s: {method} {url}") from exc
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc

        logger.debug(
            "api response",
            method=method,
            url=url,
            status=response.status_code,
            elapsed_ms=round((time.monotonic() - started) * 1000, 1),
        )

        raw = response.text or ""
        if 200 <= response.status_code < 300:
            if not raw.strip():
                return {}
            try:
                return json.loads(raw)
            except ValueError as exc:
                raise ResponseParseError(f"failed to parse response: {exc}") from exc

        body_out: object | None
        if raw.strip():
            try:
                body_out = json.loads(raw)
            except ValueError:
                body_out = raw
        else:
            body_out = {}
        raise APIRequestError(
            _error_message(response.status_code, body_out),
            status_code=response.status_code,
            body=body_out,
        )


__all__ = ["DEFAULT_TIMEOUT", "HTTPTransport", "build_auth_header"]
