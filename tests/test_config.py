from __future__ import annotations

import pytest

from clawprint.client import ClawprintClient
from clawprint.config import DEFAULT_API_URL, load_settings
from clawprint.errors import ConfigError


def test_defaults_when_nothing_configured(tmp_path) -> None:
    settings = load_settings(env_file=tmp_path / "missing.env")
    assert settings.api_url == DEFAULT_API_URL
    assert settings.api_key is None
    assert settings.timeout == 30.0
    assert not settings.has_api_key


def test_credential_file_used_when_env_not_set(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "CLAWPRINT_API_URL=https://file.example/api\nCLAWPRINT_API_KEY=pk_f:sk_f\n",
        encoding="utf-8",
    )
    settings = load_settings(env_file=env_file)
    assert settings.api_url == "https://file.example/api"
    assert settings.api_key == "pk_f:sk_f"


def test_env_overrides_credential_file(tmp_path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("CLAWPRINT_API_KEY=pk_f:sk_f\n", encoding="utf-8")
    monkeypatch.setenv("CLAWPRINT_API_KEY", "pk_e:sk_e")
    settings = load_settings(env_file=env_file)
    assert settings.api_key == "pk_e:sk_e"


def test_explicit_arguments_win(monkeypatch) -> None:
    monkeypatch.setenv("CLAWPRINT_API_URL", "https://env.example/api")
    settings = load_settings(api_url="http://arg.example/api", api_key="pk_a:sk_a", timeout=3)
    assert settings.api_url == "http://arg.example/api"
    assert settings.api_key == "pk_a:sk_a"
    assert settings.timeout == 3.0


def test_default_credential_file_is_in_working_directory(tmp_path) -> None:
    (tmp_path / ".env").write_text("CLAWPRINT_API_URL=https://cwd.example/api\n", encoding="utf-8")
    assert load_settings().api_url == "https://cwd.example/api"


def test_timeout_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("CLAWPRINT_TIMEOUT", "12.5")
    assert load_settings().timeout == 12.5


@pytest.mark.parametrize("raw", ["soon", "0", "-4"])
def test_invalid_timeout_rejected(monkeypatch, raw) -> None:
    monkeypatch.setenv("CLAWPRINT_TIMEOUT", raw)
    with pytest.raises(ConfigError):
        load_settings()


def test_quoted_key_in_credential_file_builds_clean_header(tmp_path) -> None:
    (tmp_path / ".env").write_text('CLAWPRINT_API_KEY="pk_a:sk_b"\n', encoding="utf-8")

    client = ClawprintClient()

    assert client.api_key == "pk_a:sk_b"
    assert client.transport.headers()["Authorization"] == "Bearer pk_a:sk_b"
