"""Persisted rule schema shared by profile, permanent and backup files.

Each file holds a JSON list of ``{conditions, actions, comment, options?}``
objects. Remote identity and owner fields are never written; when reading,
unknown keys (for example ``_id`` in older backups) are ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, JsonValue, TypeAdapter

from hamalert_cli.domain.model import RuleRecord


class StoredTriggerPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    conditions: dict[str, JsonValue]
    actions: list[str] = Field(default_factory=list)
    comment: str = ""
    options: JsonValue = None

    def to_record(self) -> RuleRecord:
        return RuleRecord.create(
            conditions=self.conditions,
            actions=self.actions,
            comment=self.comment,
            options=self.options,
        )


STORED_TRIGGERS_ADAPTER: TypeAdapter[list[StoredTriggerPayload]] = TypeAdapter(
    list[StoredTriggerPayload]
)


def record_to_json(record: RuleRecord) -> dict[str, JsonValue]:
    document: dict[str, JsonValue] = {
        "conditions": record.conditions.to_json(),
        "actions": list(record.actions),
        "comment": record.comment,
    }
    if record.options is not None:
        document["options"] = record.options.to_json()
    return document
