"""Translate HamAlert payloads to and from domain rule records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hamalert_cli.domain.model import RemoteRule, RuleRecord

if TYPE_CHECKING:
    from hamalert_cli.domain.model import JsonValue

    from .schema import TriggerPayload


def parse_trigger(payload: TriggerPayload) -> RemoteRule:
    record = RuleRecord.create(
        conditions=payload.conditions,
        actions=payload.actions,
        comment=payload.comment,
        options=payload.options,
    )
    return RemoteRule(remote_id=payload.id, record=record, owner_id=payload.user_id)


def build_trigger_body(record: RuleRecord) -> dict[str, JsonValue]:
    """Request body for ``/ajax/trigger_update``; no ``_id`` so a new trigger is created."""

    return {
        "conditions": record.conditions.to_json(),
        "actions": list(record.actions),
        "comment": record.comment,
        "options": record.options.to_json() if record.options is not None else {},
    }
