from __future__ import annotations

import json
from collections.abc import Callable  # noqa: TC003
from urllib.parse import parse_qs

import httpx
import pytest

from hamalert_cli.adapters.hamalert import (
    HamAlertClient,
    TriggerPayload,
    build_trigger_body,
    parse_trigger,
)
from hamalert_cli.adapters.http_resilience import ResilientClient
from hamalert_cli.config import HamAlertConfig, ResilienceConfig, default_hamalert_resilience
from hamalert_cli.domain.errors import LoginError, TriggerSourceError
from hamalert_cli.domain.model import RuleRecord

SESSION_COOKIE = "hamalert-session"


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def _config() -> HamAlertConfig:
    return HamAlertConfig(
        username="N0CALL",
        password="secret",
        resilience=default_hamalert_resilience(),
    )


def _trigger_json(trigger_id: str, callsign: str, comment: str) -> dict[str, object]:
    return {
        "_id": trigger_id,
        "user_id": "user-1",
        "conditions": {"callsign": callsign, "mode": "cw"},
        "actions": ["app"],
        "comment": comment,
        "matchCount": 12,
        "disabled": False,
        "options": {},
    }


class _FakeHamAlert:
    """Minimal HamAlert web API: session cookie login plus trigger endpoints."""

    def __init__(self, triggers: list[dict[str, object]] | None = None) -> None:
        self.triggers = triggers or []
        self.requests: list[httpx.Request] = []
        self.login_status = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/login":
            form = parse_qs(request.content.decode())
            if self.login_status != 200 or form.get("password") != ["secret"]:
                return httpx.Response(401)
            return httpx.Response(200, headers={"set-cookie": f"session={SESSION_COOKIE}; Path=/"})

        if SESSION_COOKIE not in request.headers.get("cookie", ""):
            return httpx.Response(403)
        if path == "/ajax/triggers":
            return httpx.Response(200, json=self.triggers)
        if path == "/ajax/trigger_update":
            body = json.loads(request.content)
            new_id = f"created-{len(self.triggers) + 1}"
            self.triggers.append({"_id": new_id, **body})
            return httpx.Response(200, json={"_id": new_id})
        if path == "/ajax/trigger_delete":
            trigger_id = parse_qs(request.content.decode())["id"][0]
            self.triggers = [item for item in self.triggers if item["_id"] != trigger_id]
            return httpx.Response(200)
        return httpx.Response(404)


def test_parse_trigger_keeps_order_and_owner() -> None:
    payload = TriggerPayload.model_validate(_trigger_json("abc", "N0CALL", "friend"))

    rule = parse_trigger(payload)

    assert rule.remote_id == "abc"
    assert rule.owner_id == "user-1"
    assert rule.record.conditions.to_json() == {"callsign": "N0CALL", "mode": "cw"}
    assert rule.record.actions == ("app",)
    assert rule.comment == "friend"


def test_build_trigger_body_has_no_remote_identity() -> None:
    record = RuleRecord.create(conditions={"callsign": "N0CALL"}, actions=["url"], comment="x")

    body = build_trigger_body(record)

    assert body == {
        "conditions": {"callsign": "N0CALL"},
        "actions": ["url"],
        "comment": "x",
        "options": {},
    }
    assert "_id" not in body


def test_client_logs_in_once_and_reuses_session() -> None:
    api = _FakeHamAlert([_trigger_json("1", "N0CALL", "friend")])
    with HamAlertClient(config=_config(), client_factory=_make_client_factory(api)) as client:
        first = client.fetch()
        second = client.fetch()

    assert [rule.remote_id for rule in first] == ["1"]
    assert first == second
    assert [request.url.path for request in api.requests] == [
        "/login",
        "/ajax/triggers",
        "/ajax/triggers",
    ]
    login = api.requests[0]
    assert login.method == "POST"
    assert str(login.url).startswith("https://hamalert.org/")
    assert parse_qs(login.content.decode()) == {"username": ["N0CALL"], "password": ["secret"]}


def test_client_creates_and_deletes_triggers() -> None:
    api = _FakeHamAlert([_trigger_json("1", "N0CALL", "friend")])
    record = RuleRecord.create(
        conditions={"callsign": "K0TEST"},
        actions=["app"],
        comment="new",
        options={},
    )
    with HamAlertClient(config=_config(), client_factory=_make_client_factory(api)) as client:
        created_id = client.create(record)
        client.delete("1")
        remaining = client.fetch()

    assert created_id == "created-2"
    assert [rule.comment for rule in remaining] == ["new"]
    update = next(request for request in api.requests if request.url.path == "/ajax/trigger_update")
    assert json.loads(update.content)["conditions"] == {"callsign": "K0TEST"}


def test_create_without_echoed_id_returns_empty_id() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/login":
            return httpx.Response(200)
        return httpx.Response(200, text="OK")

    record = RuleRecord.create(conditions={"callsign": "K0TEST"}, comment="new")
    with HamAlertClient(config=_config(), client_factory=_make_client_factory(handler)) as client:
        assert client.create(record) == ""


def test_rejected_login_raises_login_error() -> None:
    api = _FakeHamAlert()
    api.login_status = 401
    client = HamAlertClient(config=_config(), client_factory=_make_client_factory(api))

    with pytest.raises(LoginError) as excinfo:
        client.fetch()
    client.close()

    assert excinfo.value.status_code == 401
    assert [request.url.path for request in api.requests] == ["/login"]


def test_remote_failure_carries_status_code() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/login":
            return httpx.Response(200)
        return httpx.Response(500)

    with HamAlertClient(config=_config(), client_factory=_make_client_factory(handler)) as client:
        with pytest.raises(TriggerSourceError) as excinfo:
            client.delete("1")

    assert excinfo.value.status_code == 500
    assert not isinstance(excinfo.value, LoginError)


def test_malformed_trigger_list_raises_trigger_source_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/login":
            return httpx.Response(200)
        return httpx.Response(200, json=[{"comment": "missing id"}])

    with HamAlertClient(config=_config(), client_factory=_make_client_factory(handler)) as client:
        with pytest.raises(TriggerSourceError, match="Unexpected trigger list payload"):
            client.fetch()


def test_transport_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/login":
            return httpx.Response(200)
        raise httpx.ConnectError("connection refused", request=request)

    with HamAlertClient(config=_config(), client_factory=_make_client_factory(handler)) as client:
        with pytest.raises(TriggerSourceError, match="Failed to fetch triggers"):
            client.fetch()


def test_config_repr_masks_password() -> None:
    assert "secret" not in repr(_config())
