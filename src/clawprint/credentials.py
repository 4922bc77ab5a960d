"""Local ``.env`` credential store.

The file uses dotenv syntax and is parsed with python-dotenv. Updates load the
whole file, mutate it, and write it back in full. Writes go to a sibling temp
file that is then renamed over the original; there is no locking between
processes.
"""

from __future__ import annotations

import io
import os
import re
import tempfile
from pathlib import Path

from dotenv import dotenv_values

from clawprint.errors import CredentialStoreError
from clawprint.logging import get_logger

API_KEY_ENV_VAR = "CLAWPRINT_API_KEY"
API_URL_ENV_VAR = "CLAWPRINT_API_URL"
ENV_FILE_ENV_VAR = "CLAWPRINT_ENV_FILE"
DEFAULT_ENV_FILE = ".env"

logger = get_logger(__name__)

_PLAIN_VALUE = re.compile(r"^[A-Za-z0-9_.:/@+\-]*$")


def default_env_path() -> Path:
    configured = os.getenv(ENV_FILE_ENV_VAR)
    if configured and configured.strip():
        return Path(configured.strip())
    return Path.cwd() / DEFAULT_ENV_FILE


def parse_env(content: str) -> dict[str, str]:
    values = dotenv_values(stream=io.StringIO(content), interpolate=False)
    return {key: value for key, value in values.items() if value is not None}


def _quote(value: str) -> str:
    if _PLAIN_VALUE.match(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def format_env(env: dict[str, str]) -> str:
    return "".join(f"{key}={_quote(value)}\n" for key, value in env.items())


def read_env(path: str | Path | None = None) -> dict[str, str]:
    env_path = Path(path) if path else default_env_path()
    if not env_path.exists():
        return {}
    try:
        content = env_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CredentialStoreError(f"failed to read credential file: {env_path}") from exc
    return parse_env(content)


def _chmod_owner_only(path: Path) -> None:
    if os.name != "posix":
        return
    path.chmod(0o600)


def write_env(env: dict[str, str], path: str | Path | None = None) -> Path:
    env_path = Path(path) if path else default_env_path()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{env_path.name}.", dir=env_path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(format_env(env))
        _chmod_owner_only(tmp_path)
        os.replace(tmp_path, env_path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise CredentialStoreError(f"failed to write credential file: {env_path}") from exc

    logger.debug("credential file written", path=str(env_path), keys=sorted(env))
    return env_path


def store_credentials(
    *,
    public_key: str,
    secret_key: str,
    api_url: str,
    path: str | Path | None = None,
) -> Path:
    """Merge the agent's key pair and API URL into the credential file."""
    env = read_env(path)
    env[API_KEY_ENV_VAR] = f"{public_key}:{secret_key}"
    env[API_URL_ENV_VAR] = api_url
    return write_env(env, path)


__all__ = [
    "API_KEY_ENV_VAR",
    "API_URL_ENV_VAR",
    "ENV_FILE_ENV_VAR",
    "default_env_path",
    "parse_env",
    "format_env",
    "read_env",
    "write_env",
    "store_credentials",
]
