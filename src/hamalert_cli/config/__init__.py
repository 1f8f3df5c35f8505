"""Application configuration helpers."""

from __future__ import annotations

from .env import read_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .hamalert import HamAlertConfig, default_hamalert_resilience, get_hamalert_config
from .http_resilience import RateLimit, ResilienceConfig, ResponseCache, RetryPolicy
from .logging import configure_logging
from .polo_notes import default_polo_notes_resilience
from .storage import StorageConfig, default_config_file, get_storage_config

__all__ = [
    "ConfigurationError",
    "HamAlertConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "ResponseCache",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "default_config_file",
    "default_hamalert_resilience",
    "default_polo_notes_resilience",
    "get_hamalert_config",
    "get_storage_config",
    "read_env_vars",
]
