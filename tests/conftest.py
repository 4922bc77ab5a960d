from __future__ import annotations

import pytest

from clawprint.client import ClawprintClient


class FakeTransport:
    """Answers ``(method, path)`` pairs from a table and records every call."""

    def __init__(self, responses: dict | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, str, object | None]] = []

    def request(self, method: str, path: str, body: object | None = None):
        self.calls.append((method, path, body))
        key = (method, path)
        if key not in self.responses:
            return {}
        result = self.responses[key]
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(body)
        return result


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    for name in ("CLAWPRINT_API_URL", "CLAWPRINT_API_KEY", "CLAWPRINT_TIMEOUT", "CLAWPRINT_ENV_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_client():
    def _make(responses: dict | None = None, *, api_key: str | None = "pk_test:sk_test"):
        transport = FakeTransport(responses)
        client = ClawprintClient(
            base_url="http://api.test/api",
            api_key=api_key,
            transport=transport,
        )
        return client, transport

    return _make
