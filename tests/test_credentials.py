from __future__ import annotations

import os

from clawprint.credentials import parse_env, read_env, store_credentials, write_env


def test_parse_env_splits_on_first_equals() -> None:
    env = parse_env("A=1\n# comment\n\nTOKEN=abc=def\nBROKEN\n  SPACED = value  \n")
    assert env == {"A": "1", "TOKEN": "abc=def", "SPACED": "value"}


def test_read_env_missing_file_is_empty(tmp_path) -> None:
    assert read_env(tmp_path / "nope.env") == {}


def test_store_credentials_merges_existing_keys(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("OTHER=keep\nCLAWPRINT_API_KEY=pk_old:sk_old\n", encoding="utf-8")

    written = store_credentials(
        public_key="pk_new",
        secret_key="sk_new",
        api_url="http://localhost:3000/api",
        path=env_file,
    )

    assert written == env_file
    assert read_env(env_file) == {
        "OTHER": "keep",
        "CLAWPRINT_API_KEY": "pk_new:sk_new",
        "CLAWPRINT_API_URL": "http://localhost:3000/api",
    }


def test_write_env_replaces_whole_file_without_leftovers(tmp_path) -> None:
    env_file = tmp_path / "creds" / ".env"
    write_env({"A": "1", "B": "2"}, env_file)
    write_env({"A": "3"}, env_file)

    assert env_file.read_text(encoding="utf-8") == "A=3\n"
    assert sorted(p.name for p in env_file.parent.iterdir()) == [".env"]
    if os.name == "posix":
        assert env_file.stat().st_mode & 0o777 == 0o600


def test_default_path_follows_env_var(tmp_path, monkeypatch) -> None:
    target = tmp_path / "custom.env"
    monkeypatch.setenv("CLAWPRINT_ENV_FILE", str(target))

    write_env({"X": "y"})

    assert read_env() == {"X": "y"}
    assert target.exists()


def test_parse_env_understands_quotes_and_export() -> None:
    env = parse_env(
        'CLAWPRINT_API_KEY="pk_a:sk_b"\n'
        "export CLAWPRINT_API_URL='https://api.example/api'\n"
        "NOTE=plain # trailing comment\n"
    )
    assert env == {
        "CLAWPRINT_API_KEY": "pk_a:sk_b",
        "CLAWPRINT_API_URL": "https://api.example/api",
        "NOTE": "plain",
    }


def test_values_needing_quotes_survive_rewrite(tmp_path) -> None:
    env_file = tmp_path / ".env"
    value = 'two words "quoted" #hash'

    write_env({"NAME": value, "KEY": "pk_a:sk_b"}, env_file)

    assert read_env(env_file) == {"NAME": value, "KEY": "pk_a:sk_b"}
    assert "KEY=pk_a:sk_b\n" in env_file.read_text(encoding="utf-8")
