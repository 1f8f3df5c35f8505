"""Pydantic models describing the HamAlert trigger API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, JsonValue, TypeAdapter


class HamAlertBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TriggerPayload(HamAlertBaseModel):
    """One trigger as returned by ``/ajax/triggers``."""

    id: str = Field(alias="_id")
    user_id: str | None = None
    conditions: dict[str, JsonValue]
    actions: list[str] = Field(default_factory=list)
    comment: str = ""
    match_count: int | None = Field(default=None, alias="matchCount")
    disabled: bool | None = None
    options: JsonValue = None


class TriggerUpdateResponse(HamAlertBaseModel):
    id: str | None = Field(default=None, alias="_id")


TRIGGER_LIST_ADAPTER: TypeAdapter[list[TriggerPayload]] = TypeAdapter(list[TriggerPayload])
