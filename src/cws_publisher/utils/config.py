"""Credential file handling for the CLI.

Resolution order for the credentials file path:

1. explicit ``--config`` argument,
2. ``CWS_CONFIG`` environment variable,
3. ``~/.cws-cli/config.json``.

When the resolved file does not exist and no path was given explicitly, the
``CWS_CLIENT_ID`` / ``CWS_CLIENT_SECRET`` / ``CWS_REFRESH_TOKEN`` /
``CWS_PUBLISHER_ID`` variables are used as a group.  ``CWS_API_BASE_URL`` and
``CWS_TOKEN_URL`` override the service endpoints.

The file holds secrets, so it is written atomically with mode ``0600``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from cws_publisher.store_client.client import BASE_URL
from cws_publisher.store_client.errors import ValidationError
from cws_publisher.store_client.models import Credentials
from cws_publisher.store_client.tokens import TOKEN_URL

logger = logging.getLogger("cws-publisher.utils.config")

CONFIG_ENV: Final[str] = "CWS_CONFIG"
DEFAULT_CONFIG_PATH: Final[Path] = Path.home() / ".cws-cli" / "config.json"

_ENV_KEYS: Final[dict[str, str]] = {
    "clientId": "CWS_CLIENT_ID",
    "clientSecret": "CWS_CLIENT_SECRET",
    "refreshToken": "CWS_REFRESH_TOKEN",
    "publisherId": "CWS_PUBLISHER_ID",
}


class ConfigError(ValueError):
    """Raised when credentials cannot be located, parsed or validated."""


@dataclass(frozen=True)
class Endpoints:
    base_url: str = BASE_URL
    token_url: str = TOKEN_URL

    @classmethod
    def from_env(cls) -> "Endpoints":
        return cls(
            base_url=(os.getenv("CWS_API_BASE_URL") or BASE_URL).rstrip("/"),
            token_url=os.getenv("CWS_TOKEN_URL") or TOKEN_URL,
        )


def resolve_config_path(config_path: str | os.PathLike[str] | None = None) -> Path:
    raw = config_path or os.getenv(CONFIG_ENV)
    return Path(raw).expanduser() if raw else DEFAULT_CONFIG_PATH


def _credentials_from_env() -> Credentials | None:
    values = {key: os.getenv(env) for key, env in _ENV_KEYS.items()}
    if not any(values.values()):
        return None
    try:
        return Credentials.from_mapping(values)
    except ValidationError as exc:
        missing_env = ", ".join(env for key, env in _ENV_KEYS.items() if not values[key])
        raise ConfigError(f"Incomplete environment credentials; missing {missing_env}") from exc


def load_credentials(config_path: str | os.PathLike[str] | None = None) -> Credentials:
    """Return the configured credentials.

    Raises
    ------
    ConfigError
        If no file (and no environment fallback) exists, the file is not valid
        JSON, or required fields are missing.
    """
    path = resolve_config_path(config_path)
    if not path.exists():
        if config_path is None:
            from_env = _credentials_from_env()
            if from_env is not None:
                logger.debug("Using credentials from CWS_* environment variables")
                return from_env
        raise ConfigError(
            f"Config file not found: {path}\nRun 'cws-publisher configure' to create one."
        )

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to load config: invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to load config: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Failed to load config: {path} must contain a JSON object")
    try:
        creds = Credentials.from_mapping(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
    logger.debug("Loaded credentials from %s", path)
    return creds


def save_credentials(
    credentials: Credentials, config_path: str | os.PathLike[str] | None = None
) -> Path:
    """Persist *credentials* atomically (temp file + ``os.replace``) with mode 0600."""
    path = resolve_config_path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=".config-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(credentials.to_mapping(), fh, indent=2)
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)  # atomic on POSIX
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved credentials to %s", path)
    return path


def example_config() -> dict[str, str]:
    return {
        "clientId": "your-google-client-id.apps.googleusercontent.com",
        "clientSecret": "your-client-secret",
        "refreshToken": "your-refresh-token",
        "publisherId": "your-publisher-id",
    }
