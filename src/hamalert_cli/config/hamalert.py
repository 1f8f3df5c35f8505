"""HamAlert account and endpoint configuration."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .env import read_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .storage import default_config_file

if TYPE_CHECKING:
    from pathlib import Path

HAMALERT_BASE_URL = "https://hamalert.org"
HAMALERT_TIMEOUT_SECONDS = 10.0

USERNAME_ENV = "HAMALERT_USERNAME"
PASSWORD_ENV = "HAMALERT_PASSWORD"

_CONFIG_TEMPLATE = 'username = "your_username"\npassword = "your_password"\n'


@dataclass(frozen=True)
class HamAlertConfig:
    """Holds HamAlert credentials and HTTP settings."""

    username: str
    password: str
    resilience: ResilienceConfig

    def __repr__(self) -> str:
        return f"HamAlertConfig(username={self.username!r}, password='***')"


def default_hamalert_resilience() -> ResilienceConfig:
    # no response cache: every plan must see the live trigger list
    return ResilienceConfig(
        name="hamalert",
        base_url=HAMALERT_BASE_URL,
        timeout_seconds=HAMALERT_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        retry=RetryPolicy(total=3),
        cache=None,
    )


def _read_config_file(path: Path) -> dict[str, str]:
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise MissingConfigurationError(
            f"Config file not found at: {path}\n\n"
            "Please create a config file with the following format:\n\n"
            f"{_CONFIG_TEMPLATE}"
        ) from None
    except OSError as exc:
        raise ConfigurationError(f"Failed to read config file at {path}: {exc}") from exc

    try:
        document = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Failed to parse config file: {exc}") from exc

    values: dict[str, str] = {}
    for key in ("username", "password"):
        value = document.get(key)
        if not isinstance(value, str) or not value.strip():
            raise MissingConfigurationError(f"Missing configuration for: {key} (in {path})")
        values[key] = value
    return values


def get_hamalert_config(
    *,
    config_file: Path | None = None,
    resilience: ResilienceConfig | None = None,
) -> HamAlertConfig:
    """Load credentials from the environment, falling back to the TOML config file."""

    env_values = read_env_vars((USERNAME_ENV, PASSWORD_ENV))
    if config_file is None and len(env_values) == 2:  # noqa: PLR2004
        username, password = env_values[USERNAME_ENV], env_values[PASSWORD_ENV]
    else:
        file_values = _read_config_file(config_file or default_config_file())
        username, password = file_values["username"], file_values["password"]

    return HamAlertConfig(
        username=username,
        password=password,
        resilience=resilience or default_hamalert_resilience(),
    )
