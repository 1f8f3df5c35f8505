"""HTTP client for the HamAlert trigger API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from hamalert_cli.adapters.http_resilience import ResilientClient
from hamalert_cli.config import HamAlertConfig, get_hamalert_config
from hamalert_cli.config.hamalert import HAMALERT_BASE_URL
from hamalert_cli.domain.errors import LoginError, TriggerSourceError
from hamalert_cli.domain.ports import TriggerSource

from .schema import TRIGGER_LIST_ADAPTER, TriggerUpdateResponse
from .translator import build_trigger_body, parse_trigger

if TYPE_CHECKING:
    from collections.abc import Coroutine
    from types import TracebackType

    from hamalert_cli.adapters.http_resilience import ClientFactory
    from hamalert_cli.domain.model import RemoteId, RemoteRule, RuleRecord

log = getLogger(__name__)

LOGIN_PATH = "/login"
TRIGGERS_PATH = "/ajax/triggers"
TRIGGER_UPDATE_PATH = "/ajax/trigger_update"
TRIGGER_DELETE_PATH = "/ajax/trigger_delete"


def _ensure_success(response: httpx.Response, message: str) -> None:
    if not response.is_success:
        raise TriggerSourceError(message, status_code=response.status_code)


@dataclass(slots=True)
class HamAlertClient:
    """Session-based ``TriggerSource`` backed by the HamAlert web API.

    The async HTTP client lives on one event loop owned by an ``asyncio.Runner``
    so the login cookie survives between the synchronous calls made by the
    domain services. Log in happens lazily before the first request.
    """

    config: HamAlertConfig = field(default_factory=get_hamalert_config)
    client_factory: ClientFactory = ResilientClient
    _runner: asyncio.Runner | None = field(default=None, init=False, repr=False)
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    def __enter__(self) -> HamAlertClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._runner is None:
            return
        if self._client is not None:
            self._runner.run(self._client.aclose())
            self._client = None
        self._runner.close()
        self._runner = None

    def fetch(self) -> list[RemoteRule]:
        return self._run(self._fetch_async())

    def create(self, record: RuleRecord) -> RemoteId:
        return self._run(self._create_async(record))

    def delete(self, remote_id: RemoteId) -> None:
        self._run(self._delete_async(remote_id))

    def _run[T](self, coro: Coroutine[object, object, T]) -> T:
        if self._runner is None:
            self._runner = asyncio.Runner()
        return self._runner.run(coro)

    def _url(self, path: str) -> str:
        base_url = self.config.resilience.base_url or HAMALERT_BASE_URL
        return base_url.rstrip("/") + path

    async def _session(self) -> ResilientClient:
        if self._client is None:
            client = self.client_factory(self.config.resilience)
            try:
                await self._login(client)
            except BaseException:
                await client.aclose()
                raise
            self._client = client
        return self._client

    async def _login(self, client: ResilientClient) -> None:
        try:
            response = await client.post(
                self._url(LOGIN_PATH),
                data={"username": self.config.username, "password": self.config.password},
                follow_redirects=True,
            )
        except httpx.HTTPError as exc:
            raise LoginError(f"Login request failed: {exc}") from exc
        log.debug("Login status: %s", response.status_code)
        if not response.is_success:
            raise LoginError("Login failed", status_code=response.status_code)

    async def _fetch_async(self) -> list[RemoteRule]:
        client = await self._session()
        try:
            response = await client.get(self._url(TRIGGERS_PATH))
        except httpx.HTTPError as exc:
            raise TriggerSourceError(f"Failed to fetch triggers: {exc}") from exc
        _ensure_success(response, "Failed to fetch triggers")

        try:
            payloads = TRIGGER_LIST_ADAPTER.validate_json(response.content)
        except ValidationError as exc:
            raise TriggerSourceError(f"Unexpected trigger list payload: {exc}") from exc
        log.debug("Fetched %s trigger(s)", len(payloads))
        return [parse_trigger(payload) for payload in payloads]

    async def _create_async(self, record: RuleRecord) -> RemoteId:
        client = await self._session()
        try:
            response = await client.post(
                self._url(TRIGGER_UPDATE_PATH),
                json=build_trigger_body(record),
            )
        except httpx.HTTPError as exc:
            raise TriggerSourceError(f"Failed to create trigger '{record.comment}': {exc}") from exc
        _ensure_success(response, f"Failed to create trigger '{record.comment}'")
        return _created_id(response)

    async def _delete_async(self, remote_id: RemoteId) -> None:
        client = await self._session()
        try:
            response = await client.post(self._url(TRIGGER_DELETE_PATH), data={"id": remote_id})
        except httpx.HTTPError as exc:
            raise TriggerSourceError(f"Failed to delete trigger {remote_id}: {exc}") from exc
        _ensure_success(response, f"Failed to delete trigger {remote_id}")


def _created_id(response: httpx.Response) -> RemoteId:
    """Best-effort id of a newly created trigger; empty when the API does not echo one."""

    if not response.content:
        return ""
    try:
        payload = response.json()
    except ValueError:
        return ""
    if isinstance(payload, dict):
        try:
            return TriggerUpdateResponse.model_validate(payload).id or ""
        except ValidationError:
            return ""
    return ""


if TYPE_CHECKING:
    _source_check: TriggerSource = HamAlertClient()
