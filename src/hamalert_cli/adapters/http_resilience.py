"""Async HTTP client shared by the remote adapters.

``ResilientClient`` wraps ``httpx.AsyncClient`` with an ``httpx-retries``
transport, an ``aiolimiter`` rate limit and, when configured, a hishel
response cache stored in a sqlite file. Cookies set by responses persist for the
lifetime of the client, which is what keeps a HamAlert login session alive across
calls.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import RetryTransport

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from hamalert_cli.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


def _build_client(
    config: ResilienceConfig,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.AsyncClient:
    options: dict[str, Any] = {
        "timeout": httpx.Timeout(config.timeout_seconds),
        "transport": RetryTransport(transport=transport, retry=config.retry.build()),
        "headers": {"User-Agent": config.user_agent},
    }
    if config.base_url is not None:
        options["base_url"] = config.base_url

    if config.cache is None:
        return httpx.AsyncClient(**options)
    config.cache.path.parent.mkdir(parents=True, exist_ok=True)
    storage = AsyncSqliteStorage(
        database_path=str(config.cache.path),
        default_ttl=config.cache.ttl_seconds,
    )
    return AsyncCacheClient(**options, storage=storage)


class ResilientClient:
    """``transport`` replaces the network layer below the retry and cache layers."""

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit is not None
            else None
        )
        self._client = _build_client(config, transport)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(
        self,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        return await self._request("GET", url, params=params, follow_redirects=follow_redirects)

    async def post(
        self,
        url: str,
        *,
        data: Mapping[str, str] | None = None,
        json: object = None,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        return await self._request(
            "POST", url, data=data, json=json, follow_redirects=follow_redirects
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        log.debug("[%s] %s %s", self.config.name, method, url)
        if self._limiter is None:
            return await self._client.request(method, url, **kwargs)
        async with self._limiter:
            return await self._client.request(method, url, **kwargs)


async def http_get_resilient(
    config: ResilienceConfig,
    url: str,
    *,
    client_factory: ClientFactory = ResilientClient,
    params: Mapping[str, str] | None = None,
    follow_redirects: bool = False,
) -> httpx.Response:
    """One-shot GET through a short-lived ``ResilientClient``."""

    async with client_factory(config) as client:
        return await client.get(url, params=params, follow_redirects=follow_redirects)
