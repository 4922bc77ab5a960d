"""Client settings resolved from arguments, environment and credential file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from clawprint.credentials import API_KEY_ENV_VAR, API_URL_ENV_VAR, read_env
from clawprint.errors import ConfigError
from clawprint.transport import DEFAULT_TIMEOUT

DEFAULT_API_URL = "http://localhost:3000/api"
TIMEOUT_ENV_VAR = "CLAWPRINT_TIMEOUT"


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_key: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def _first_non_empty(*values: str | None) -> str | None:
    for value in values:
        if value is not None and value.strip():
            return value.strip()
    return None


def _to_timeout(value: object) -> float:
    try:
        timeout = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"timeout must be a number of seconds, got {value!r}") from exc
    if timeout <= 0:
        raise ConfigError("timeout must be > 0")
    return timeout


def load_settings(
    *,
    api_url: str | None = None,
    api_key: str | None = None,
    timeout: float | None = None,
    env_file: str | Path | None = None,
) -> Settings:
    """Precedence per field: explicit argument, environment, credential file, default."""
    file_env = read_env(env_file)

    resolved_url = _first_non_empty(
        api_url,
        os.getenv(API_URL_ENV_VAR),
        file_env.get(API_URL_ENV_VAR),
    ) or DEFAULT_API_URL

    resolved_key = _first_non_empty(
        api_key,
        os.getenv(API_KEY_ENV_VAR),
        file_env.get(API_KEY_ENV_VAR),
    )

    if timeout is not None:
        resolved_timeout = _to_timeout(timeout)
    else:
        raw_timeout = _first_non_empty(os.getenv(TIMEOUT_ENV_VAR), file_env.get(TIMEOUT_ENV_VAR))
        resolved_timeout = _to_timeout(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT

    return Settings(api_url=resolved_url, api_key=resolved_key, timeout=resolved_timeout)
