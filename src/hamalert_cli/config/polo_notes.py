"""Ham2K PoLo callsign notes fetch settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .http_resilience import ResilienceConfig, ResponseCache, RetryPolicy
from .storage import get_storage_config

if TYPE_CHECKING:
    from .storage import StorageConfig

POLO_NOTES_TIMEOUT_SECONDS = 15.0
POLO_NOTES_CACHE_TTL_SECONDS = 600.0


def default_polo_notes_resilience(storage: StorageConfig | None = None) -> ResilienceConfig:
    """Cached GETs; the cache file lives in the data directory."""

    cache_path = (storage or get_storage_config()).http_cache_path
    return ResilienceConfig(
        name="polo-notes",
        timeout_seconds=POLO_NOTES_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=2),
        cache=ResponseCache(path=cache_path, ttl_seconds=POLO_NOTES_CACHE_TTL_SECONDS),
    )
