from __future__ import annotations

import types

import pytest
import requests

from clawprint.errors import (
    APIRequestError,
    APITimeoutError,
    RequestEncodingError,
    ResponseParseError,
    TransportError,
)
from clawprint.transport import HTTPTransport


def _fake_response(status_code: int, text: str = ""):
    return types.SimpleNamespace(status_code=status_code, text=text)


def _capture(monkeypatch, transport: HTTPTransport, response) -> dict[str, object]:
    captured: dict[str, object] = {}

    def fake_request(method, url, *, data=None, headers=None, timeout=None):  # noqa: ANN001
        captured["method"] = method
        captured["url"] = url
        captured["data"] = data
        captured["headers"] = headers
        captured["timeout"] = timeout
        return response

    monkeypatch.setattr(transport._session, "request", fake_request)
    return captured


def test_request_sets_json_and_bearer_headers(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api", api_key="pk_abc:sk_def")
    captured = _capture(monkeypatch, transport, _fake_response(200, '{"ok": true}'))

    result = transport.request("POST", "/businesses", {"legal_name": "Acme AI"})

    assert result == {"ok": True}
    headers = captured["headers"]
    assert headers["Content-Type"] == "application/json"
    assert headers["Authorization"] == "Bearer pk_abc:sk_def"
    assert captured["data"] == b'{"legal_name": "Acme AI"}'
    assert captured["timeout"] == 30.0


def test_request_omits_authorization_without_key(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api")
    captured = _capture(monkeypatch, transport, _fake_response(200, "{}"))

    transport.request("GET", "/health")

    assert "Authorization" not in captured["headers"]
    assert captured["headers"]["Content-Type"] == "application/json"
    assert captured["data"] is None


def test_url_keeps_base_path_prefix(monkeypatch) -> None:
    transport = HTTPTransport(base_url="https://clawprint.example/api/")
    captured = _capture(monkeypatch, transport, _fake_response(200, "{}"))

    transport.request("GET", "/businesses/biz_1/status")

    assert captured["url"] == "https://clawprint.example/api/businesses/biz_1/status"


def test_empty_success_body_resolves_to_empty_object(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api")
    _capture(monkeypatch, transport, _fake_response(204, ""))

    assert transport.request("DELETE", "/businesses/biz_1") == {}


def test_error_status_exposes_code_and_body(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api")
    _capture(monkeypatch, transport, _fake_response(409, '{"error": "Email already registered"}'))

    with pytest.raises(APIRequestError) as excinfo:
        transport.request("POST", "/agents", {"email": "a@b.co"})

    assert excinfo.value.status_code == 409
    assert excinfo.value.body == {"error": "Email already registered"}
    assert excinfo.value.message == "Email already registered"
    assert excinfo.value.is_conflict


def test_error_without_error_field_falls_back_to_status(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api")
    _capture(monkeypatch, transport, _fake_response(502, "<html>Bad Gateway</html>"))

    with pytest.raises(APIRequestError) as excinfo:
        transport.request("GET", "/health")

    assert excinfo.value.status_code == 502
    assert excinfo.value.message == "HTTP 502"
    assert excinfo.value.body == "<html>Bad Gateway</html>"


def test_redirect_status_is_an_error(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api")
    _capture(monkeypatch, transport, _fake_response(304, ""))

    with pytest.raises(APIRequestError) as excinfo:
        transport.request("GET", "/businesses")
    assert excinfo.value.status_code == 304


def test_unparseable_success_body_raises_parse_error(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api")
    _capture(monkeypatch, transport, _fake_response(200, "not json"))

    with pytest.raises(ResponseParseError):
        transport.request("GET", "/health")


def test_timeout_raises_timeout_error(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api", timeout=0.5)

    def fake_request(*args, **kwargs):  # noqa: ANN002, ANN003
        raise requests.ReadTimeout("read timed out")

    monkeypatch.setattr(transport._session, "request", fake_request)

    with pytest.raises(APITimeoutError) as excinfo:
        transport.request("GET", "/health")
    assert "0.5s" in str(excinfo.value)
    assert isinstance(excinfo.value, TransportError)


def test_connection_error_raises_transport_error(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api")

    def fake_request(*args, **kwargs):  # noqa: ANN002, ANN003
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(transport._session, "request", fake_request)

    with pytest.raises(TransportError) as excinfo:
        transport.request("GET", "/health")
    assert not isinstance(excinfo.value, APITimeoutError)
    assert "connection refused" in str(excinfo.value)


def test_unserializable_body_fails_before_sending(monkeypatch) -> None:
    transport = HTTPTransport(base_url="http://localhost:3000/api")
    calls: list[object] = []
    monkeypatch.setattr(transport._session, "request", lambda *a, **k: calls.append(a))

    with pytest.raises(RequestEncodingError):
        transport.request("POST", "/invoices", {"when": object()})
    assert calls == []
