"""Settings for the shared async HTTP client."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003
from typing import Final

import httpx
from httpx_retries import Retry

from hamalert_cli import __version__

# POSTs to HamAlert are not idempotent and are never replayed
READ_ONLY_METHODS: Final[frozenset[str]] = frozenset({"GET", "HEAD"})
TRANSIENT_STATUSES: Final[frozenset[int]] = frozenset({429, 502, 503, 504})
USER_AGENT: Final[str] = f"hamalert-cli/{__version__}"


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 3
    backoff_factor: float = 0.5
    methods: frozenset[str] = READ_ONLY_METHODS
    statuses: frozenset[int] = TRANSIENT_STATUSES

    def build(self) -> Retry:
        return Retry(
            total=self.total,
            backoff_factor=self.backoff_factor,
            allowed_methods=sorted(self.methods),
            status_forcelist=sorted(self.statuses),
            retry_on_exceptions=(httpx.TimeoutException, httpx.NetworkError),
        )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResponseCache:
    """hishel response cache persisted in a sqlite file, shared across runs."""

    path: Path
    ttl_seconds: float | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: ResponseCache | None = None
    user_agent: str = USER_AGENT
