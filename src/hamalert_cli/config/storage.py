"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "hamalert"
PROFILES_DIRNAME: Final[str] = "profiles"
BACKUPS_DIRNAME: Final[str] = "backups"
PERMANENT_FILENAME: Final[str] = "permanent.json"
CURRENT_PROFILE_FILENAME: Final[str] = "current-profile"
CONFIG_FILENAME: Final[str] = "config.toml"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
DATA_DIR_ENV: Final[str] = "HAMALERT_DATA_DIR"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Locations of profiles, backups and bookkeeping files under one data directory."""

    data_dir: Path

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    @property
    def profiles_dir(self) -> Path:
        return self.resolve_data_dir() / PROFILES_DIRNAME

    @property
    def backups_dir(self) -> Path:
        return self.resolve_data_dir() / BACKUPS_DIRNAME

    @property
    def permanent_path(self) -> Path:
        return self.resolve_data_dir() / PERMANENT_FILENAME

    @property
    def current_profile_path(self) -> Path:
        return self.resolve_data_dir() / CURRENT_PROFILE_FILENAME

    @property
    def http_cache_path(self) -> Path:
        return self.resolve_data_dir() / HTTP_CACHE_FILENAME


def _app_dir(*, xdg_var: str, xdg_default: Path, windows_var: str, windows_default: Path) -> Path:
    """Per-user application directory following XDG on POSIX and AppData on Windows."""

    var, fallback = (windows_var, windows_default) if os.name == "nt" else (xdg_var, xdg_default)
    base = os.getenv(var)
    return ((Path(base) if base else fallback) / APP_DIR_NAME).expanduser().resolve()


def default_config_file() -> Path:
    config_dir = _app_dir(
        xdg_var="XDG_CONFIG_HOME",
        xdg_default=Path.home() / ".config",
        windows_var="APPDATA",
        windows_default=Path.home() / "AppData" / "Roaming",
    )
    return config_dir / CONFIG_FILENAME


def get_storage_config() -> StorageConfig:
    """Data directory from ``HAMALERT_DATA_DIR``, else the per-user data directory."""

    env_dir = os.getenv(DATA_DIR_ENV)
    if env_dir:
        return StorageConfig(data_dir=Path(env_dir))
    return StorageConfig(
        data_dir=_app_dir(
            xdg_var="XDG_DATA_HOME",
            xdg_default=Path.home() / ".local" / "share",
            windows_var="LOCALAPPDATA",
            windows_default=Path.home() / "AppData" / "Local",
        )
    )
